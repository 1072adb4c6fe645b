"""
Notifications app services layer.

Services contain business logic and orchestrate operations across models.
"""

from apps.notifications.models import NotificationType

from .exceptions import (
    NotificationsServiceError,
    ConsentRequiredError,
    MissingPhoneError,
    EmptyMessageError,
    InvalidMessageTypeError,
    TransportError,
)

from .sender import (
    NotificationSender,
    get_notification_sender,
    format_phone,
    amount_due,
    BULK_MESSAGE_TYPES,
)


__all__ = [
    'NotificationType',

    # Exceptions
    'NotificationsServiceError',
    'ConsentRequiredError',
    'MissingPhoneError',
    'EmptyMessageError',
    'InvalidMessageTypeError',
    'TransportError',

    # Sender
    'NotificationSender',
    'get_notification_sender',
    'format_phone',
    'amount_due',
    'BULK_MESSAGE_TYPES',
]
