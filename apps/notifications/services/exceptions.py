"""
Domain-specific exceptions for notifications app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class NotificationsServiceError(Exception):
    """Base exception for all notifications service errors."""
    pass


class ConsentRequiredError(NotificationsServiceError):
    """Raised when the resident has not agreed to receive WhatsApp messages."""
    pass


class MissingPhoneError(NotificationsServiceError):
    """Raised when the resident has no phone number on file."""
    pass


class EmptyMessageError(NotificationsServiceError):
    """Raised when there is no message text to send."""
    pass


class InvalidMessageTypeError(NotificationsServiceError):
    """Raised when a bulk send names an unknown message type."""
    pass


class TransportError(NotificationsServiceError):
    """Raised when the backend crashed instead of reporting a failed delivery."""
    pass
