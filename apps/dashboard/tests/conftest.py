import pytest
from datetime import date, datetime
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.payments.models import Payment, PaymentStatus
from apps.residents.models import Resident, Token, ResidentPaymentStatus, TokenStatus


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def authenticated_client(db):
    user = User.objects.create_user(email='viewer@example.com', password='TestPass123!')
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def neighborhood(db):
    """
    Three residents seen from 2024-03-15.

    Ana registered in February and paid February and March; Luis registered
    in March with an unpaid March payment; Carla registered in March and
    owes without any payment on file.
    """
    ana = Resident.objects.create(
        name='Ana', last_name='Pérez', cedula='001-0000001-1',
        registration_number='R-001', payment_status=ResidentPaymentStatus.PAID,
        next_payment_date=date(2024, 4, 30),
    )
    luis = Resident.objects.create(
        name='Luis', last_name='Gómez', cedula='001-0000002-2',
        registration_number='R-002', payment_status=ResidentPaymentStatus.PENDING,
        next_payment_date=date(2024, 3, 30),
    )
    carla = Resident.objects.create(
        name='Carla', last_name='Díaz', cedula='001-0000003-3',
        registration_number='R-003', payment_status=ResidentPaymentStatus.OVERDUE,
        next_payment_date=date(2024, 2, 29),
    )
    Resident.objects.filter(pk=ana.pk).update(
        created_at=timezone.make_aware(datetime(2024, 2, 10))
    )
    Resident.objects.filter(pk__in=[luis.pk, carla.pk]).update(
        created_at=timezone.make_aware(datetime(2024, 3, 2))
    )

    old_token = Token.objects.create(resident=ana, name='Portón', status=TokenStatus.ACTIVE)
    Token.objects.filter(pk=old_token.pk).update(created_at=timezone.make_aware(datetime(2024, 2, 10)))
    Token.objects.create(resident=luis, name='Portón', status=TokenStatus.ACTIVE)
    Token.objects.create(resident=carla, name='Portón', status=TokenStatus.INACTIVE)

    Payment.objects.create(
        resident=ana, amount=Decimal('500.00'), month=2, year=2024, due_date=date(2024, 2, 29),
        status=PaymentStatus.PAID, payment_date=timezone.make_aware(datetime(2024, 2, 20)),
    )
    Payment.objects.create(
        resident=ana, amount=Decimal('700.00'), month=3, year=2024, due_date=date(2024, 3, 30),
        status=PaymentStatus.COMPLETED, payment_date=timezone.make_aware(datetime(2024, 3, 5)),
    )
    Payment.objects.create(
        resident=luis, amount=Decimal('650.00'), month=3, year=2024, due_date=date(2024, 3, 30),
        status=PaymentStatus.PENDING,
    )
    return {'ana': ana, 'luis': luis, 'carla': carla}
