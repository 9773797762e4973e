"""
Custom domain exceptions for the contact relay.

Raised by the validation and mail layers and converted to JSON responses by
the centralized exception handlers in main.py. Every response body carries a
single human-readable ``message`` field.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message returned to the client.
        correlation_id: Request correlation ID (auto-generated if not provided).
    """

    def __init__(self, message: str, correlation_id: str | None = None):
        self.message = message
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class OriginDeniedException(DomainException):
    """Raised when a request declares an origin outside the allow-list."""

    def __init__(self, origin: str):
        super().__init__(f"Origin '{origin}' is not allowed by the CORS policy.")
        self.origin = origin


class ValidationException(DomainException):
    """Raised when a submission fails validation."""

    pass


class MissingFieldsException(ValidationException):
    """Raised when a required contact field is absent or empty."""

    def __init__(self, message: str = "Missing required fields."):
        super().__init__(message)


class InvalidEmailFormatException(ValidationException):
    """Raised when the submitted email address is not syntactically valid."""

    def __init__(self, message: str = "Invalid email format."):
        super().__init__(message)


class EmailDeliveryException(DomainException):
    """Raised when the mail provider does not accept the message."""

    def __init__(self, message: str = "Internal server error."):
        super().__init__(message)
