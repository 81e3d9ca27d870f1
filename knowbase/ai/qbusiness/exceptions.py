"""Custom exceptions for the Q Business integration package."""


class QBusinessError(Exception):
    """Base exception for all Q Business errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 502,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.original_error = original_error


class QBusinessConfigurationError(QBusinessError):
    """Raised when the application id is not configured."""

    pass


class QBusinessAnonymousModeError(QBusinessError):
    """Raised when an anonymous-only application rejects a call even without a user id."""

    pass
