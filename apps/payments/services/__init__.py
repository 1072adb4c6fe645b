"""
Payments app services layer.

Services contain business logic and orchestrate operations across models.
"""

from .exceptions import (
    PaymentsServiceError,
    PaymentValidationError,
    NotFoundError,
    ResidentNotFoundError,
    PaymentNotFoundError,
    DuplicatePaymentPeriodError,
    NotificationDeliveryError,
)

from .status_engine import (
    PaymentStatusEngine,
    get_engine,
)


__all__ = [
    # Exceptions
    'PaymentsServiceError',
    'PaymentValidationError',
    'NotFoundError',
    'ResidentNotFoundError',
    'PaymentNotFoundError',
    'DuplicatePaymentPeriodError',
    'NotificationDeliveryError',

    # Engine
    'PaymentStatusEngine',
    'get_engine',
]
