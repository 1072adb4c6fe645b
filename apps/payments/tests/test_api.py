import pytest
from decimal import Decimal
from datetime import date
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.notifications.backends import locmem
from apps.payments.models import Payment, PaymentStatus
from apps.residents.models import ResidentPaymentStatus


def _payment(resident, month, year, status=PaymentStatus.COMPLETED, amount='700.00', paid_on=None):
    return Payment.objects.create(
        resident=resident,
        amount=Decimal(amount),
        month=month,
        year=year,
        due_date=date(year, month, 28),
        payment_date=paid_on,
        status=status,
    )


# =============================================================================
# Record Payment Tests
# =============================================================================

@pytest.mark.django_db
class TestRecordPayment:
    """Tests for POST /api/payments/"""

    def test_manager_records_current_payment(self, manager_client, resident):
        today = timezone.localdate()
        url = reverse('payments:payment-list')
        response = manager_client.post(url, {
            'resident': resident.id,
            'amount': '700.00',
            'month': today.month,
            'year': today.year,
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['status'] == PaymentStatus.COMPLETED
        assert response.data['is_settled'] is True
        resident.refresh_from_db()
        assert resident.payment_status == ResidentPaymentStatus.PAID

    def test_viewer_cannot_record(self, viewer_client, resident):
        url = reverse('payments:payment-list')
        response = viewer_client.post(url, {'resident': resident.id, 'amount': '700.00'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_duplicate_period_conflict(self, manager_client, resident):
        _payment(resident, 3, 2024)
        url = reverse('payments:payment-list')
        response = manager_client.post(url, {
            'resident': resident.id, 'amount': '700.00', 'month': 3, 'year': 2024,
        })

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'duplicate_period'

    def test_zero_amount(self, manager_client, resident):
        url = reverse('payments:payment-list')
        response = manager_client.post(url, {'resident': resident.id, 'amount': '0'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'validation_error'

    def test_invalid_month(self, manager_client, resident):
        url = reverse('payments:payment-list')
        response = manager_client.post(url, {'resident': resident.id, 'amount': '700', 'month': 13})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_resident(self, manager_client):
        url = reverse('payments:payment-list')
        response = manager_client.post(url, {'resident': 9999, 'amount': '700.00'})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == 'resident_not_found'


# =============================================================================
# Listing Tests
# =============================================================================

@pytest.mark.django_db
class TestPaymentLists:

    def test_list_filters(self, viewer_client, resident, february_debtor):
        _payment(resident, 2, 2024)
        _payment(february_debtor, 2, 2024, status=PaymentStatus.PENDING)

        url = reverse('payments:payment-list')
        response = viewer_client.get(url, {'status': 'pending'})

        assert response.status_code == status.HTTP_200_OK
        assert [p['resident'] for p in response.data['results']] == [february_debtor.id]

    def test_pending_ordered_by_due_date(self, viewer_client, resident):
        later = _payment(resident, 2, 2024, status=PaymentStatus.OVERDUE)
        earlier = _payment(resident, 1, 2024, status=PaymentStatus.PENDING)
        _payment(resident, 3, 2024)

        response = viewer_client.get(reverse('payments:payment-pending'))

        assert [p['id'] for p in response.data] == [earlier.id, later.id]

    def test_recent_settled_payments(self, viewer_client, resident):
        _payment(resident, 1, 2024, status=PaymentStatus.PAID, paid_on=timezone.now())
        _payment(resident, 2, 2024, status=PaymentStatus.PENDING)

        response = viewer_client.get(reverse('payments:payment-recent'))

        assert len(response.data) == 1
        assert response.data[0]['month_name'] == 'enero'
        assert response.data[0]['resident_name'] == 'Ana Pérez'


# =============================================================================
# Validation Tests
# =============================================================================

@pytest.mark.django_db
class TestValidatePayment:
    """Tests for POST /api/payments/{id}/validate/"""

    def test_admin_validates(self, admin_client, february_debtor):
        payment = _payment(february_debtor, 2, 2024, status=PaymentStatus.PENDING)
        url = reverse('payments:payment-validate', args=[payment.id])
        response = admin_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == PaymentStatus.PAID
        february_debtor.refresh_from_db()
        assert february_debtor.payment_status == ResidentPaymentStatus.PAID

    def test_manager_cannot_validate(self, manager_client, february_debtor):
        payment = _payment(february_debtor, 2, 2024, status=PaymentStatus.PENDING)
        url = reverse('payments:payment-validate', args=[payment.id])
        response = manager_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_payment(self, admin_client):
        url = reverse('payments:payment-validate', args=[9999])
        response = admin_client.post(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_non_numeric_id(self, admin_client):
        response = admin_client.post('/api/payments/abc/validate/')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_retrieve_non_numeric_id(self, viewer_client):
        response = viewer_client.get('/api/payments/abc/')

        assert response.status_code == status.HTTP_404_NOT_FOUND


# =============================================================================
# Batch Operation Tests
# =============================================================================

@pytest.mark.django_db
class TestBatchOperations:

    def test_check_overdue(self, admin_client, february_debtor):
        url = reverse('payments:payment-check-overdue')
        response = admin_client.post(url, {'date': '2024-03-06'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['updated_count'] == 1
        assert response.data['notified_count'] == 1
        february_debtor.refresh_from_db()
        assert february_debtor.payment_status == ResidentPaymentStatus.OVERDUE

    def test_check_overdue_in_grace_period(self, admin_client, february_debtor):
        url = reverse('payments:payment-check-overdue')
        response = admin_client.post(url, {'date': '2024-03-05'})

        assert response.data['skipped'] is True
        assert locmem.outbox == []

    def test_check_overdue_requires_admin(self, manager_client):
        url = reverse('payments:payment-check-overdue')
        response = manager_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_send_reminders(self, admin_client, resident):
        url = reverse('payments:payment-send-reminders')
        response = admin_client.post(url, {'date': '2024-03-25'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['candidates'] == 1
        assert response.data['notified_count'] == 1

    def test_open_cycle(self, admin_client, paid_resident):
        url = reverse('payments:payment-open-cycle')
        response = admin_client.post(url, {'date': '2024-02-01'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['updated_count'] == 1
        paid_resident.refresh_from_db()
        assert paid_resident.payment_status == ResidentPaymentStatus.PENDING

    def test_invalid_date(self, admin_client):
        url = reverse('payments:payment-open-cycle')
        response = admin_client.post(url, {'date': 'yesterday'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
