"""Exceptions raised by the document-store layer."""


class DocumentStoreError(Exception):
    """Raised when a DynamoDB operation fails.

    The upstream message is kept verbatim so handlers can pass it through
    to the caller.
    """

    status_code = 500

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        table_name: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.table_name = table_name
        self.original_error = original_error

    def __str__(self) -> str:
        return self.message
