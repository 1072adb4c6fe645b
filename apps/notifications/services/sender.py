"""
Notification sender.

Builds the Spanish message templates sent to residents and delivers them
through a backend from ``apps.notifications.backends``. The sender holds no
connection state of its own; the backend's lifecycle belongs to whoever
created it.

Example:
    >>> with get_backend() as backend:
    ...     sender = NotificationSender(backend)
    ...     sender.send_reminder(resident)
    True
"""

import logging
import re
import time
from datetime import timedelta
from decimal import Decimal
from typing import Callable, Iterable, Optional

from django.conf import settings
from django.utils import timezone

from apps.notifications.backends import get_backend, BaseNotificationBackend
from apps.notifications.models import Notification, NotificationType
from apps.payments.models import Payment, SETTLED_STATUSES

from .exceptions import (
    ConsentRequiredError,
    MissingPhoneError,
    EmptyMessageError,
    InvalidMessageTypeError,
    TransportError,
)

logger = logging.getLogger(__name__)

SIGNATURE = "Saludos cordiales,\nAdministración"

MESSAGE_PAYMENT_REMINDER = 'payment_reminder'
MESSAGE_OVERDUE_PAYMENT = 'overdue_payment'
MESSAGE_MAINTENANCE = 'maintenance_notification'
MESSAGE_CUSTOM = 'custom'

BULK_MESSAGE_TYPES = (
    MESSAGE_PAYMENT_REMINDER,
    MESSAGE_OVERDUE_PAYMENT,
    MESSAGE_MAINTENANCE,
    MESSAGE_CUSTOM,
)

DEFAULT_DAYS_OVERDUE = 30
MAINTENANCE_NOTICE_DAYS = 7


def format_phone(phone: str, country_code: str = None) -> str:
    """
    Normalize a phone number for WhatsApp.

    Strips every non-digit and prefixes the country code when the number
    does not already start with it.

    Example:
        >>> format_phone('(809) 555-1234')
        '18095551234'
    """
    country_code = country_code if country_code is not None else settings.WHATSAPP_COUNTRY_CODE
    digits = re.sub(r'\D', '', phone or '')
    if not digits:
        return ''
    if country_code and not digits.startswith(country_code):
        digits = f"{country_code}{digits}"
    return digits


def monthly_fee() -> Decimal:
    return Decimal(str(getattr(settings, 'BILLING_MONTHLY_FEE', '700.00')))


def amount_due(resident) -> Decimal:
    """Amount of the resident's latest unsettled payment, or the standard fee."""
    payment = (
        Payment.objects.filter(resident=resident)
        .exclude(status__in=SETTLED_STATUSES)
        .order_by('-year', '-month')
        .first()
    )
    return payment.amount if payment else monthly_fee()


def _format_date(value) -> str:
    return value.strftime('%d/%m/%Y') if value else 'No especificada'


class NotificationSender:
    """
    Message templates plus delivery through a backend.

    Args:
        backend: A ``BaseNotificationBackend``; defaults to the configured one.
        send_delay: Seconds to wait between messages of ``send_bulk``.
            Single sends never wait; engine sweeps and reminders pace
            themselves with the engine's own ``send_delay``.
        sleep: Callable used for the delay (injected so tests never wait).
    """

    def __init__(
        self,
        backend: Optional[BaseNotificationBackend] = None,
        send_delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.backend = backend or get_backend()
        if send_delay is None:
            send_delay = getattr(settings, 'NOTIFICATIONS_SEND_DELAY', 2.0)
        self.send_delay = send_delay
        self.sleep = sleep

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def build_reminder_message(self, resident, amount=None, due_date=None) -> str:
        amount = amount if amount is not None else amount_due(resident)
        due_date = due_date or resident.next_payment_date
        return (
            f"Hola {resident.full_name},\n\n"
            f"Este es un recordatorio de que su pago de mantenimiento vence el {_format_date(due_date)}.\n"
            f"Monto a pagar: ${amount}\n\n"
            f"Por favor, realice su pago a tiempo para evitar cargos adicionales.\n\n"
            f"{SIGNATURE}"
        )

    def build_overdue_message(self, resident, amount=None, days_overdue=None) -> str:
        amount = amount if amount is not None else amount_due(resident)
        text = f"Hola {resident.full_name},\n\nLe informamos que su pago de mantenimiento está vencido"
        if days_overdue:
            text += f" desde hace {days_overdue} días"
        return (
            f"{text}.\n"
            f"Monto pendiente: ${amount}\n\n"
            f"Por favor, regularice su situación lo antes posible para evitar sanciones.\n\n"
            f"{SIGNATURE}"
        )

    def build_maintenance_message(self, title, description, scheduled_for) -> str:
        return (
            f"*{title}*\n\n"
            f"{description}\n\n"
            f"Fecha programada: {_format_date(scheduled_for)}\n\n"
            f"{SIGNATURE}"
        )

    def build_custom_message(self, resident, template: str) -> str:
        return template.replace('{name}', resident.full_name)

    def days_overdue(self, resident, now=None) -> int:
        """Days since the resident's last payment; 30 when there is none."""
        if not resident.last_payment_date:
            return DEFAULT_DAYS_OVERDUE
        now = now or timezone.now()
        return max((now - resident.last_payment_date).days, 0)

    # ------------------------------------------------------------------
    # Delivery
    # ------------------------------------------------------------------

    def _deliver(self, resident, message: str) -> bool:
        if not resident.has_phone:
            raise MissingPhoneError(f"Resident {resident.id} has no phone number")

        phone = format_phone(resident.phone)
        try:
            sent = self.backend.send_text(phone, message)
        except OSError as e:
            logger.error("Backend crashed sending to resident %s: %s", resident.id, e)
            raise TransportError(str(e)) from e

        if not sent:
            logger.warning("Message to resident %s (%s) was not delivered", resident.id, phone)
        return bool(sent)

    def log_notification(self, resident, message: str, type=NotificationType.WHATSAPP) -> Notification:
        return Notification.objects.create(resident=resident, message=message, type=type)

    def send_overdue_notice(self, resident) -> bool:
        """Overdue notice; logged as a warning when delivered."""
        message = self.build_overdue_message(resident)
        sent = self._deliver(resident, message)
        if sent:
            self.log_notification(resident, message, NotificationType.WARNING)
        return sent

    def send_reminder(self, resident) -> bool:
        """Upcoming-payment reminder; logged as a reminder when delivered."""
        message = self.build_reminder_message(resident)
        sent = self._deliver(resident, message)
        if sent:
            self.log_notification(resident, message, NotificationType.REMINDER)
        return sent

    def send_custom(self, resident, message: str) -> bool:
        """Free text with an optional ``{name}`` placeholder."""
        if not message or not message.strip():
            raise EmptyMessageError("Message text is required")
        text = self.build_custom_message(resident, message)
        sent = self._deliver(resident, text)
        if sent:
            self.log_notification(resident, text, NotificationType.WHATSAPP)
        return sent

    def send_direct(self, resident, message: str) -> bool:
        """
        Operator-initiated message to a single resident.

        Raises:
            ConsentRequiredError: If the resident has not consented
            EmptyMessageError: If ``message`` is blank
            MissingPhoneError: If the resident has no phone number
        """
        if not resident.whatsapp_consent:
            raise ConsentRequiredError(
                "El residente no ha dado consentimiento para recibir mensajes por WhatsApp"
            )
        return self.send_custom(resident, message)

    def record_alert(self, resident, message: str) -> Notification:
        """Store an in-app alert without sending anything."""
        if not message or not message.strip():
            raise EmptyMessageError("Message text is required")
        logger.info("Alert for resident %s: %s", resident.id, message)
        return self.log_notification(resident, message, NotificationType.ALERT)

    def build_bulk_message(self, resident, message_type: str, custom_message: str = None, today=None) -> str:
        today = today or timezone.localdate()
        if message_type == MESSAGE_PAYMENT_REMINDER:
            return self.build_reminder_message(
                resident, amount=monthly_fee(), due_date=resident.next_payment_date or today
            )
        if message_type == MESSAGE_OVERDUE_PAYMENT:
            return self.build_overdue_message(
                resident, amount=monthly_fee(), days_overdue=self.days_overdue(resident)
            )
        if message_type == MESSAGE_MAINTENANCE:
            return self.build_maintenance_message(
                'Mantenimiento Programado',
                'Se realizará mantenimiento preventivo en las áreas comunes del residencial.',
                today + timedelta(days=MAINTENANCE_NOTICE_DAYS),
            )
        if message_type == MESSAGE_CUSTOM:
            return self.build_custom_message(resident, custom_message)
        raise InvalidMessageTypeError(f"Invalid message type: {message_type}")

    def send_bulk(self, residents: Iterable, message_type: str, custom_message: str = None, today=None) -> dict:
        """
        Send one message type to many residents, one at a time.

        Waits ``send_delay`` seconds between messages. A failure for one
        resident is recorded in its result row and never stops the batch.

        Returns:
            dict with ``total``, ``successful``, ``failed`` and ``results``
            (one row per resident, status ``sent``, ``failed`` or ``error``)

        Raises:
            InvalidMessageTypeError: If ``message_type`` is unknown
            EmptyMessageError: If a custom send has no message
        """
        if message_type not in BULK_MESSAGE_TYPES:
            raise InvalidMessageTypeError(f"Invalid message type: {message_type}")
        if message_type == MESSAGE_CUSTOM and not (custom_message and custom_message.strip()):
            raise EmptyMessageError("Custom message is required")

        residents = list(residents)
        results = []
        successful = 0

        for index, resident in enumerate(residents):
            row = {
                'resident_id': resident.id,
                'name': resident.full_name,
                'phone': resident.phone,
            }
            try:
                message = self.build_bulk_message(resident, message_type, custom_message, today)
                if self._deliver(resident, message):
                    successful += 1
                    self.log_notification(
                        resident, f"WhatsApp masivo enviado: {message_type}", NotificationType.WHATSAPP
                    )
                    row['status'] = 'sent'
                else:
                    row['status'] = 'failed'
            except (MissingPhoneError, TransportError) as e:
                row['status'] = 'error'
                row['error'] = str(e)
            results.append(row)

            if self.send_delay and index < len(residents) - 1:
                self.sleep(self.send_delay)

        logger.info(
            "Bulk %s: %s of %s residents reached", message_type, successful, len(residents)
        )
        return {
            'total': len(residents),
            'successful': successful,
            'failed': len(residents) - successful,
            'results': results,
        }

    def status(self) -> dict:
        return self.backend.status()


def get_notification_sender(**kwargs) -> NotificationSender:
    """Sender over the configured backend and send delay."""
    return NotificationSender(**kwargs)
