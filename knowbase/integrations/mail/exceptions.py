"""Mail delivery exceptions."""


class MailError(Exception):
    """Raised when SES rejects or fails to deliver a message."""

    status_code = 500

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize mail error.

        Args:
            message: Error message
            original_error: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error
