class BrokerError(Exception):
    """Base class for errors surfaced by the upload broker."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(BrokerError):
    """Raised when a client-supplied field is missing or malformed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, {"field": field} if field else None)
        self.field = field


class ConfigurationError(BrokerError):
    """Raised when storage credentials, endpoints or bucket are not configured."""


class StoreUnavailableError(BrokerError):
    """Raised when the object store cannot list objects or sign a request."""
