"""Exception hierarchy for the preview API."""

from typing import Any


class PreviewError(Exception):
    """Base exception for all preview API errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_type: str = "api_error",
        raw_error: Any = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type
        self.raw_error = raw_error

    def to_error_format(self) -> dict:
        """Convert to the JSON error envelope."""
        return {
            "type": "error",
            "error": {
                "type": self.error_type,
                "message": self.message,
            },
        }


class InvalidRequestError(PreviewError):
    """Raised when request parameters are invalid."""

    def __init__(self, message: str, raw_error: Any = None):
        super().__init__(
            message,
            status_code=400,
            error_type="invalid_request_error",
            raw_error=raw_error,
        )


class UnknownActionError(PreviewError):
    """Raised when a format request names an action that does not exist."""

    def __init__(self, action: str, raw_error: Any = None):
        super().__init__(
            f"Unknown format action: {action}",
            status_code=400,
            error_type="unknown_action_error",
            raw_error=raw_error,
        )


class InvalidTimezoneError(PreviewError):
    """Raised when a request names a timezone that is not in the tz database."""

    def __init__(self, timezone: str, raw_error: Any = None):
        super().__init__(
            f"Unknown timezone: {timezone}",
            status_code=400,
            error_type="invalid_timezone_error",
            raw_error=raw_error,
        )
