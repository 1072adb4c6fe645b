"""
Payment status engine.

Every change to a resident's payment state goes through this module:
recording and validating payments, the overdue sweep, payment reminders
and opening a new billing cycle. Views and management commands are thin
adapters around ``PaymentStatusEngine``.

Resident states::

    pending --record_payment/validate_payment--> paid
    pending --sweep_overdue (after grace period)--> overdue | late
    overdue/late --record_payment/validate_payment--> paid
    paid --open_billing_cycle--> pending

The engine receives a ``NotificationSender`` at construction; it never opens
or closes the sender's backend.

Example:
    Daily batch run::

        with get_backend() as backend:
            engine = PaymentStatusEngine(NotificationSender(backend))
            result = engine.sweep_overdue(status=ResidentPaymentStatus.LATE)
"""

import logging
import time
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from django.conf import settings
from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.notifications.services import NotificationSender, NotificationsServiceError
from apps.payments.billing import (
    end_of_billing_cycle,
    next_due_date,
    grace_deadline,
    is_past_grace_period,
    is_current_or_future,
    current_cycle_window,
)
from apps.payments.models import Payment, PaymentStatus
from apps.residents.models import Resident, Token, ResidentPaymentStatus, TokenStatus, OVERDUE_STATUSES

from .exceptions import (
    PaymentValidationError,
    ResidentNotFoundError,
    PaymentNotFoundError,
    DuplicatePaymentPeriodError,
    NotificationDeliveryError,
)

logger = logging.getLogger(__name__)


class PaymentStatusEngine:
    """
    State machine for resident payment status.

    Args:
        notifier: ``NotificationSender`` used for overdue notices and reminders.
        send_delay: Seconds between consecutive messages of a sweep or
            reminder batch; defaults to ``NOTIFICATIONS_SEND_DELAY``. The
            notifier's own delay only applies to its ``send_bulk``.
        sleep: Callable used for the delay.
    """

    def __init__(
        self,
        notifier: Optional[NotificationSender] = None,
        send_delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.notifier = notifier or NotificationSender()
        if send_delay is None:
            send_delay = getattr(settings, 'NOTIFICATIONS_SEND_DELAY', 2.0)
        self.send_delay = send_delay
        self.sleep = sleep

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_amount(amount) -> Decimal:
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, TypeError, ValueError):
            raise PaymentValidationError(f"Invalid amount: {amount!r}")
        if not value.is_finite() or value <= 0:
            raise PaymentValidationError("Amount must be greater than zero")

        field = Payment._meta.get_field('amount')
        integer_digits = field.max_digits - field.decimal_places
        try:
            value = value.quantize(Decimal(1).scaleb(-field.decimal_places))
        except InvalidOperation:
            raise PaymentValidationError(f"Invalid amount: {amount!r}")
        if value.adjusted() >= integer_digits:
            raise PaymentValidationError(f"Amount must have at most {integer_digits} integer digits")
        return value

    @staticmethod
    def _parse_period(month, year):
        try:
            month, year = int(month), int(year)
        except (TypeError, ValueError):
            raise PaymentValidationError("Month and year must be integers")
        if not 1 <= month <= 12:
            raise PaymentValidationError("Month must be between 1 and 12")
        if year < 1:
            raise PaymentValidationError("Year must be positive")
        return month, year

    @staticmethod
    def _mark_paid(resident: Resident, paid_at: datetime, next_date: date) -> None:
        """Set resident and all its tokens to paid; tokens are reactivated."""
        resident.payment_status = ResidentPaymentStatus.PAID
        resident.last_payment_date = paid_at
        resident.next_payment_date = next_date
        resident.save(update_fields=['payment_status', 'last_payment_date', 'next_payment_date', 'updated_at'])

        Token.objects.filter(resident=resident).update(
            status=TokenStatus.ACTIVE,
            payment_status=ResidentPaymentStatus.PAID,
            last_payment_date=paid_at,
            next_payment_date=next_date,
            updated_at=timezone.now(),
        )

    @transaction.atomic
    def record_payment(
        self,
        *,
        resident_id: int,
        amount,
        month: int = None,
        year: int = None,
        today: date = None,
        now: datetime = None
    ) -> Payment:
        """
        Record a resident's payment for one billing period.

        Args:
            resident_id: Paying resident
            amount: Positive decimal amount (str, int or Decimal)
            month/year: Period paid; default to today's
            today: Reference date; defaults to the current local date
            now: Timestamp stored as payment date

        Returns:
            The created Payment (status ``completed``)

        Raises:
            PaymentValidationError: If amount or period are invalid
            ResidentNotFoundError: If the resident doesn't exist
            DuplicatePaymentPeriodError: If the period is already paid

        Note:
            A payment for a past period is stored but leaves the resident's
            status untouched.
        """
        today = today or timezone.localdate()
        now = now or timezone.now()

        value = self._parse_amount(amount)
        month, year = self._parse_period(
            month if month is not None else today.month,
            year if year is not None else today.year,
        )

        try:
            resident = Resident.objects.select_for_update().get(id=resident_id)
        except Resident.DoesNotExist:
            raise ResidentNotFoundError(f"Resident with ID {resident_id} not found")

        if Payment.objects.filter(resident=resident, month=month, year=year).exists():
            raise DuplicatePaymentPeriodError(
                f"Resident {resident_id} already has a payment for {month:02d}/{year}"
            )

        try:
            payment = Payment.objects.create(
                resident=resident,
                amount=value,
                month=month,
                year=year,
                payment_date=now,
                due_date=end_of_billing_cycle(year, month),
                status=PaymentStatus.COMPLETED,
            )
        except IntegrityError:
            raise DuplicatePaymentPeriodError(
                f"Resident {resident_id} already has a payment for {month:02d}/{year}"
            )

        if is_current_or_future(year, month, today):
            self._mark_paid(resident, now, next_due_date(year, month))
            logger.info(
                "Resident %s paid %02d/%s; next payment due %s",
                resident.id, month, year, resident.next_payment_date
            )
        else:
            logger.info("Stored past-period payment %02d/%s for resident %s", month, year, resident.id)

        return payment

    @transaction.atomic
    def validate_payment(self, *, payment_id: int, now: datetime = None) -> Payment:
        """
        Confirm a payment and settle its resident.

        The resident's next due date is computed from the validation date,
        not from the payment's period, and every token of the resident is
        updated.

        Raises:
            PaymentNotFoundError: If the payment doesn't exist
        """
        now = now or timezone.now()

        try:
            payment = Payment.objects.select_for_update().select_related('resident').get(id=payment_id)
        except (Payment.DoesNotExist, ValueError):
            raise PaymentNotFoundError(f"Payment with ID {payment_id} not found")

        payment.status = PaymentStatus.PAID
        payment.payment_date = now
        payment.save(update_fields=['status', 'payment_date', 'updated_at'])

        local_today = timezone.localdate(now) if timezone.is_aware(now) else now.date()
        self._mark_paid(payment.resident, now, next_due_date(local_today.year, local_today.month))

        logger.info("Validated payment %s of resident %s", payment.id, payment.resident_id)
        return payment

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------

    def _deliver(self, send, resident) -> None:
        try:
            sent = send(resident)
        except NotificationsServiceError as e:
            raise NotificationDeliveryError(str(e)) from e
        if not sent:
            raise NotificationDeliveryError(f"Message to resident {resident.id} was not delivered")

    def _notify_all(self, residents, send) -> dict:
        """Send to each resident in turn; failures are collected, never raised."""
        notified = 0
        failures = []

        for index, resident in enumerate(residents):
            try:
                self._deliver(send, resident)
                notified += 1
            except NotificationDeliveryError as e:
                logger.warning("Notification to resident %s failed: %s", resident.id, e)
                failures.append({'resident_id': resident.id, 'error': str(e)})
            except Exception as e:
                logger.exception("Unexpected error notifying resident %s", resident.id)
                failures.append({'resident_id': resident.id, 'error': str(e)})

            if self.send_delay and index < len(residents) - 1:
                self.sleep(self.send_delay)

        return {
            'notified_count': notified,
            'failed_count': len(failures),
            'failures': failures,
        }

    def sweep_overdue(
        self,
        *,
        today: date = None,
        status: str = ResidentPaymentStatus.OVERDUE,
        notify: bool = True
    ) -> dict:
        """
        Escalate unpaid residents once the grace period is over.

        Residents still ``pending`` whose next payment date falls before
        the grace deadline become ``status`` (``overdue`` or ``late``); their
        tokens mirror the label and are deactivated. The transition is
        committed before any message goes out, so notification failures
        never undo it.

        Returns:
            dict with ``skipped``, ``updated_count``, ``notified_count``,
            ``failed_count`` and ``failures``
        """
        today = today or timezone.localdate()
        if status not in OVERDUE_STATUSES:
            raise PaymentValidationError(f"Sweep label must be overdue or late, got {status}")

        result = {
            'skipped': False,
            'updated_count': 0,
            'notified_count': 0,
            'failed_count': 0,
            'failures': [],
        }

        if not is_past_grace_period(today):
            logger.info("Sweep skipped on %s: still within grace period", today)
            result['skipped'] = True
            return result

        deadline = grace_deadline(today)
        with transaction.atomic():
            residents = list(
                Resident.objects.select_for_update().filter(
                    payment_status=ResidentPaymentStatus.PENDING,
                    next_payment_date__lt=deadline,
                )
            )
            ids = [resident.id for resident in residents]
            if ids:
                now = timezone.now()
                Resident.objects.filter(id__in=ids).update(payment_status=status, updated_at=now)
                Token.objects.filter(resident_id__in=ids).update(
                    payment_status=status,
                    status=TokenStatus.INACTIVE,
                    updated_at=now,
                )

        for resident in residents:
            resident.payment_status = status
            logger.info(
                "Resident %s marked %s (next payment date %s before %s)",
                resident.id, status, resident.next_payment_date, deadline
            )
        result['updated_count'] = len(residents)

        if notify:
            reachable = [resident for resident in residents if resident.has_phone]
            result.update(self._notify_all(reachable, self.notifier.send_overdue_notice))

        logger.info(
            "Sweep on %s: %s updated, %s notified, %s failed",
            today, result['updated_count'], result['notified_count'], result['failed_count']
        )
        return result

    def send_reminders(self, *, today: date = None) -> dict:
        """
        Remind pending residents whose payment falls due in this cycle.

        Statuses are not modified.

        Returns:
            dict with ``candidates``, ``notified_count``, ``failed_count``
            and ``failures``
        """
        today = today or timezone.localdate()
        start, end = current_cycle_window(today)

        residents = list(
            Resident.objects.filter(
                payment_status=ResidentPaymentStatus.PENDING,
                next_payment_date__gte=start,
                next_payment_date__lte=end,
            )
        )
        reachable = [resident for resident in residents if resident.has_phone]

        result = {'candidates': len(residents)}
        result.update(self._notify_all(reachable, self.notifier.send_reminder))

        logger.info(
            "Reminders for cycle %s..%s: %s candidates, %s notified, %s failed",
            start, end, result['candidates'], result['notified_count'], result['failed_count']
        )
        return result

    @transaction.atomic
    def open_billing_cycle(self, *, today: date = None) -> dict:
        """
        Start a new billing cycle.

        Paid residents whose next payment date falls on or before the end
        of the current cycle go back to ``pending``, and so do their tokens'
        payment status. Token activation is left alone.

        Returns:
            dict with ``updated_count``
        """
        today = today or timezone.localdate()
        cycle_end = end_of_billing_cycle(today.year, today.month)

        ids = list(
            Resident.objects.select_for_update().filter(
                payment_status=ResidentPaymentStatus.PAID,
                next_payment_date__lte=cycle_end,
            ).values_list('id', flat=True)
        )
        if ids:
            now = timezone.now()
            Resident.objects.filter(id__in=ids).update(
                payment_status=ResidentPaymentStatus.PENDING, updated_at=now
            )
            Token.objects.filter(resident_id__in=ids).update(
                payment_status=ResidentPaymentStatus.PENDING, updated_at=now
            )

        logger.info("Opened billing cycle ending %s: %s residents back to pending", cycle_end, len(ids))
        return {'updated_count': len(ids)}


def get_engine(backend=None, **kwargs) -> PaymentStatusEngine:
    """Engine over a sender for ``backend`` (the configured one by default)."""
    return PaymentStatusEngine(NotificationSender(backend), **kwargs)
