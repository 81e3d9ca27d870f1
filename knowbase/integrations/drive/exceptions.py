"""Custom exceptions for the Google Drive integration."""

from typing import Any


class DriveError(Exception):
    """Raised when a Drive call fails; carries the upstream status when there is one."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: Any = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize DriveError.

        Args:
            message: Error message
            status_code: HTTP status returned by Drive, if any
            details: Error body returned by Drive
            original_error: Original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details
        self.original_error = original_error


class DriveConfigurationError(DriveError):
    """Raised when the service account or template is not configured."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=500)
