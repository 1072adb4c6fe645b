import pytest
from unittest import mock
from decimal import Decimal
from datetime import date, datetime
from django.utils import timezone
from apps.notifications.backends import locmem
from apps.notifications.backends.locmem import LocMemBackend
from apps.notifications.models import Notification, NotificationType
from apps.notifications.services import NotificationSender
from apps.payments.models import Payment, PaymentStatus
from apps.payments.services import (
    PaymentStatusEngine,
    PaymentValidationError,
    ResidentNotFoundError,
    PaymentNotFoundError,
    DuplicatePaymentPeriodError,
)
from apps.residents.models import Resident, Token, ResidentPaymentStatus, TokenStatus


def aware(*args):
    return timezone.make_aware(datetime(*args))


# =============================================================================
# record_payment
# =============================================================================

@pytest.mark.django_db
class TestRecordPayment:

    def test_current_period_marks_resident_paid(self, engine, resident):
        payment = engine.record_payment(
            resident_id=resident.id, amount=700, month=3, year=2024,
            today=date(2024, 3, 15), now=aware(2024, 3, 15, 10, 0),
        )

        assert payment.status == PaymentStatus.COMPLETED
        assert payment.amount == Decimal('700.00')
        assert payment.due_date == date(2024, 3, 30)
        resident.refresh_from_db()
        assert resident.payment_status == ResidentPaymentStatus.PAID
        assert resident.next_payment_date == date(2024, 4, 30)
        assert resident.last_payment_date == aware(2024, 3, 15, 10, 0)

    def test_duplicate_period_is_rejected_without_changes(self, engine, resident):
        engine.record_payment(resident_id=resident.id, amount=700, month=3, year=2024, today=date(2024, 3, 15))

        with pytest.raises(DuplicatePaymentPeriodError):
            engine.record_payment(resident_id=resident.id, amount=800, month=3, year=2024, today=date(2024, 3, 20))

        assert Payment.objects.filter(resident=resident).count() == 1
        assert Payment.objects.get(resident=resident).amount == Decimal('700.00')
        resident.refresh_from_db()
        assert resident.payment_status == ResidentPaymentStatus.PAID
        assert resident.next_payment_date == date(2024, 4, 30)

    def test_december_payment_wraps_to_january(self, engine, resident):
        engine.record_payment(resident_id=resident.id, amount=700, month=12, year=2024, today=date(2024, 12, 2))

        resident.refresh_from_db()
        assert resident.next_payment_date == date(2025, 1, 30)

    def test_payment_for_january_is_due_end_of_february(self, engine, resident):
        engine.record_payment(resident_id=resident.id, amount=700, month=1, year=2024, today=date(2024, 1, 10))

        resident.refresh_from_db()
        assert resident.next_payment_date == date(2024, 2, 29)

    def test_past_period_is_stored_without_status_change(self, engine, resident):
        payment = engine.record_payment(
            resident_id=resident.id, amount=700, month=1, year=2024, today=date(2024, 3, 15)
        )

        assert payment.status == PaymentStatus.COMPLETED
        resident.refresh_from_db()
        assert resident.payment_status == ResidentPaymentStatus.PENDING
        assert resident.next_payment_date == date(2024, 3, 30)

    def test_defaults_to_current_period(self, engine, resident):
        payment = engine.record_payment(resident_id=resident.id, amount='700.00', today=date(2024, 5, 8))

        assert (payment.month, payment.year) == (5, 2024)

    def test_tokens_follow_resident(self, engine, resident, resident_token):
        Token.objects.filter(id=resident_token.id).update(status=TokenStatus.INACTIVE)

        engine.record_payment(resident_id=resident.id, amount=700, month=3, year=2024, today=date(2024, 3, 15))

        resident_token.refresh_from_db()
        assert resident_token.status == TokenStatus.ACTIVE
        assert resident_token.payment_status == ResidentPaymentStatus.PAID
        assert resident_token.next_payment_date == date(2024, 4, 30)

    def test_overdue_resident_becomes_paid(self, engine, february_debtor):
        february_debtor.payment_status = ResidentPaymentStatus.LATE
        february_debtor.save()

        engine.record_payment(resident_id=february_debtor.id, amount=700, month=3, year=2024, today=date(2024, 3, 20))

        february_debtor.refresh_from_db()
        assert february_debtor.payment_status == ResidentPaymentStatus.PAID

    @pytest.mark.parametrize('amount', [0, -5, 'abc', None, 'NaN', '1e30', '12345678901', '99999999.999'])
    def test_invalid_amount(self, engine, resident, amount):
        with pytest.raises(PaymentValidationError):
            engine.record_payment(resident_id=resident.id, amount=amount, month=3, year=2024)

        assert not Payment.objects.exists()

    def test_largest_amount_that_fits(self, engine, resident):
        payment = engine.record_payment(resident_id=resident.id, amount='99999999.99', month=3, year=2024)

        assert payment.amount == Decimal('99999999.99')

    @pytest.mark.parametrize('month, year', [(0, 2024), (13, 2024), (3, 0)])
    def test_invalid_period(self, engine, resident, month, year):
        with pytest.raises(PaymentValidationError):
            engine.record_payment(resident_id=resident.id, amount=700, month=month, year=year)

    def test_unknown_resident(self, engine, db):
        with pytest.raises(ResidentNotFoundError):
            engine.record_payment(resident_id=9999, amount=700)


# =============================================================================
# validate_payment
# =============================================================================

@pytest.mark.django_db
class TestValidatePayment:

    def test_validation_settles_resident_and_every_token(self, engine, february_debtor):
        tokens = [
            Token.objects.create(resident=february_debtor, name=f'T{i}', status=TokenStatus.INACTIVE)
            for i in range(3)
        ]
        payment = Payment.objects.create(
            resident=february_debtor, amount=Decimal('700.00'), month=1, year=2024,
            due_date=date(2024, 1, 30), status=PaymentStatus.PENDING,
        )

        validated = engine.validate_payment(payment_id=payment.id, now=aware(2024, 3, 12, 9, 0))

        assert validated.status == PaymentStatus.PAID
        assert validated.payment_date == aware(2024, 3, 12, 9, 0)
        february_debtor.refresh_from_db()
        assert february_debtor.payment_status == ResidentPaymentStatus.PAID
        assert february_debtor.next_payment_date == date(2024, 4, 30)
        for token in tokens:
            token.refresh_from_db()
            assert token.status == TokenStatus.ACTIVE
            assert token.payment_status == ResidentPaymentStatus.PAID
            assert token.next_payment_date == date(2024, 4, 30)

    def test_unknown_payment(self, engine, db):
        with pytest.raises(PaymentNotFoundError):
            engine.validate_payment(payment_id=9999)

    def test_non_numeric_payment_id(self, engine, db):
        with pytest.raises(PaymentNotFoundError):
            engine.validate_payment(payment_id='abc')


# =============================================================================
# sweep_overdue
# =============================================================================

@pytest.mark.django_db
class TestSweepOverdue:

    @pytest.mark.parametrize('day', [1, 3, 5])
    def test_grace_period_is_a_no_op(self, engine, february_debtor, day):
        result = engine.sweep_overdue(today=date(2024, 3, day))

        assert result['skipped'] is True
        assert result['updated_count'] == 0
        assert result['notified_count'] == 0
        february_debtor.refresh_from_db()
        assert february_debtor.payment_status == ResidentPaymentStatus.PENDING
        assert locmem.outbox == []

    def test_pending_debtor_becomes_overdue_and_is_notified(self, engine, february_debtor, resident, paid_resident):
        result = engine.sweep_overdue(today=date(2024, 3, 6))

        assert result['updated_count'] == 1
        assert result['notified_count'] == 1
        assert result['failures'] == []
        february_debtor.refresh_from_db()
        assert february_debtor.payment_status == ResidentPaymentStatus.OVERDUE
        # Due 2024-03-30: not yet late
        resident.refresh_from_db()
        assert resident.payment_status == ResidentPaymentStatus.PENDING
        paid_resident.refresh_from_db()
        assert paid_resident.payment_status == ResidentPaymentStatus.PAID

        phone, message = locmem.outbox[0]
        assert phone == '18095550202'
        assert 'Luis Gómez' in message
        assert 'vencido' in message
        assert Notification.objects.filter(
            resident=february_debtor, type=NotificationType.WARNING
        ).count() == 1

    def test_late_label_and_token_mirroring(self, engine, february_debtor):
        token = Token.objects.create(resident=february_debtor, name='Portón')

        engine.sweep_overdue(today=date(2024, 3, 6), status=ResidentPaymentStatus.LATE)

        february_debtor.refresh_from_db()
        token.refresh_from_db()
        assert february_debtor.payment_status == ResidentPaymentStatus.LATE
        assert token.payment_status == ResidentPaymentStatus.LATE
        assert token.status == TokenStatus.INACTIVE

    def test_rejects_non_overdue_label(self, engine, db):
        with pytest.raises(PaymentValidationError):
            engine.sweep_overdue(today=date(2024, 3, 6), status=ResidentPaymentStatus.PAID)

    def test_idempotent(self, engine, february_debtor):
        first = engine.sweep_overdue(today=date(2024, 3, 6))
        second = engine.sweep_overdue(today=date(2024, 3, 6))

        assert first['updated_count'] == 1
        assert second['updated_count'] == 0
        assert len(locmem.outbox) == 1

    def test_send_failure_does_not_stop_batch(self, engine, sleeps, february_debtor):
        other = Resident.objects.create(
            name='Zoe', last_name='Zapata', cedula='Z-1', phone='8095550909',
            payment_status=ResidentPaymentStatus.PENDING, next_payment_date=date(2024, 1, 30),
        )
        locmem.fail_for.add('18095550202')

        result = engine.sweep_overdue(today=date(2024, 3, 6))

        assert result['updated_count'] == 2
        assert result['notified_count'] == 1
        assert result['failed_count'] == 1
        assert result['failures'][0]['resident_id'] == february_debtor.id
        assert locmem.outbox[0][0] == '18095550909'
        assert sleeps == [2.0]
        # Status changes survive the failed notice
        february_debtor.refresh_from_db()
        other.refresh_from_db()
        assert february_debtor.payment_status == ResidentPaymentStatus.OVERDUE
        assert other.payment_status == ResidentPaymentStatus.OVERDUE

    def test_transport_crash_is_recorded(self, engine, february_debtor):
        locmem.raise_for.add('18095550202')

        result = engine.sweep_overdue(today=date(2024, 3, 6))

        assert result['updated_count'] == 1
        assert result['failed_count'] == 1
        assert 'Simulated transport failure' in result['failures'][0]['error']

    def test_unexpected_error_for_one_resident_does_not_stop_batch(self, engine, february_debtor):
        other = Resident.objects.create(
            name='Zoe', last_name='Zapata', cedula='Z-1', phone='8095550909',
            payment_status=ResidentPaymentStatus.PENDING, next_payment_date=date(2024, 1, 30),
        )
        log_notification = engine.notifier.log_notification

        def flaky_log(resident, message, type):
            if resident.id == february_debtor.id:
                raise RuntimeError('notification log unavailable')
            return log_notification(resident, message, type)

        with mock.patch.object(engine.notifier, 'log_notification', side_effect=flaky_log):
            result = engine.sweep_overdue(today=date(2024, 3, 6))

        assert result['updated_count'] == 2
        assert result['notified_count'] == 1
        assert result['failures'] == [
            {'resident_id': february_debtor.id, 'error': 'notification log unavailable'}
        ]
        assert Notification.objects.filter(resident=other, type=NotificationType.WARNING).exists()

    def test_batches_use_engine_delay_not_sender_delay(self, sleeps, february_debtor):
        Resident.objects.create(
            name='Zoe', last_name='Zapata', cedula='Z-1', phone='8095550909',
            payment_status=ResidentPaymentStatus.PENDING, next_payment_date=date(2024, 1, 30),
        )
        sender_sleeps = []
        sender = NotificationSender(LocMemBackend(), send_delay=5.0, sleep=sender_sleeps.append)
        engine = PaymentStatusEngine(sender, send_delay=2.0, sleep=sleeps.append)

        engine.sweep_overdue(today=date(2024, 3, 6))

        assert sleeps == [2.0]
        assert sender_sleeps == []

    def test_residents_without_phone_are_updated_but_not_notified(self, engine, db):
        silent = Resident.objects.create(
            name='Sin', last_name='Teléfono', cedula='N-1', phone='',
            payment_status=ResidentPaymentStatus.PENDING, next_payment_date=date(2024, 2, 29),
        )

        result = engine.sweep_overdue(today=date(2024, 3, 6))

        assert result['updated_count'] == 1
        assert result['notified_count'] == 0
        assert result['failed_count'] == 0
        silent.refresh_from_db()
        assert silent.payment_status == ResidentPaymentStatus.OVERDUE

    def test_without_notifications(self, engine, february_debtor):
        result = engine.sweep_overdue(today=date(2024, 3, 6), notify=False)

        assert result['updated_count'] == 1
        assert locmem.outbox == []


# =============================================================================
# Reminders and new cycle
# =============================================================================

@pytest.mark.django_db
class TestReminders:

    def test_reminds_pending_residents_due_this_cycle(self, engine, resident, february_debtor, paid_resident):
        result = engine.send_reminders(today=date(2024, 3, 25))

        assert result['candidates'] == 1
        assert result['notified_count'] == 1
        assert locmem.outbox[0][0] == '18095550101'
        assert '30/03/2024' in locmem.outbox[0][1]
        resident.refresh_from_db()
        assert resident.payment_status == ResidentPaymentStatus.PENDING
        assert Notification.objects.filter(resident=resident, type=NotificationType.REMINDER).exists()


@pytest.mark.django_db
class TestOpenBillingCycle:

    def test_paid_residents_due_this_cycle_return_to_pending(self, engine, resident, resident_token):
        engine.record_payment(resident_id=resident.id, amount=700, month=3, year=2024, today=date(2024, 3, 15))

        march = engine.open_billing_cycle(today=date(2024, 3, 31))
        april = engine.open_billing_cycle(today=date(2024, 4, 1))

        assert march['updated_count'] == 0
        assert april['updated_count'] == 1
        resident.refresh_from_db()
        resident_token.refresh_from_db()
        assert resident.payment_status == ResidentPaymentStatus.PENDING
        assert resident.next_payment_date == date(2024, 4, 30)
        assert resident_token.payment_status == ResidentPaymentStatus.PENDING
        assert resident_token.status == TokenStatus.ACTIVE

    def test_sweep_never_rearms_paid_residents(self, engine, paid_resident):
        engine.sweep_overdue(today=date(2024, 3, 20))

        paid_resident.refresh_from_db()
        assert paid_resident.payment_status == ResidentPaymentStatus.PAID
