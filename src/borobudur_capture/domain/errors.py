"""Error taxonomy for the capture coordination service."""


class CaptureError(Exception):
    """Base exception for all capture-service errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class MissingFieldError(CaptureError):
    """Raised when a required input is absent."""


class InvalidIdentifierError(CaptureError):
    """Raised when a requested session id is a placeholder or path-unsafe."""


class MalformedIdentifierError(CaptureError):
    """Raised when a ledger entry carries an unparseable session id."""


class DuplicateSessionError(CaptureError):
    """Raised when a completed session id already exists in the ledger."""


class NotConfiguredError(CaptureError):
    """Raised when a required endpoint or credential is not configured."""


class StoreUnavailableError(CaptureError):
    """Raised when a remote store call fails."""


class StoreTimeoutError(StoreUnavailableError):
    """Raised when a remote store call exceeds its time budget."""
