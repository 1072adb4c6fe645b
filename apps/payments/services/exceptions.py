"""
Domain-specific exceptions for payments app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses:

    PaymentValidationError       -> 400
    NotFoundError (subclasses)   -> 404
    DuplicatePaymentPeriodError  -> 409
    NotificationDeliveryError    -> 503 (per item inside batches)
"""


class PaymentsServiceError(Exception):
    """Base exception for all payments service errors."""
    code = 'payments_error'


class PaymentValidationError(PaymentsServiceError):
    """Raised when amount, month or year are invalid."""
    code = 'validation_error'


class NotFoundError(PaymentsServiceError):
    code = 'not_found'


class ResidentNotFoundError(NotFoundError):
    """Raised when the paying resident does not exist."""
    code = 'resident_not_found'


class PaymentNotFoundError(NotFoundError):
    """Raised when a payment does not exist."""
    code = 'payment_not_found'


class DuplicatePaymentPeriodError(PaymentsServiceError):
    """Raised when the resident already has a payment for the period."""
    code = 'duplicate_period'


class NotificationDeliveryError(PaymentsServiceError):
    """Raised when a notice could not be delivered to a resident."""
    code = 'notification_failed'
