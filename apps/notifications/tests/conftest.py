import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Role
from apps.notifications.backends import locmem
from apps.notifications.backends.locmem import LocMemBackend
from apps.notifications.services import NotificationSender
from apps.residents.models import Resident, Token, ResidentPaymentStatus


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture(autouse=True)
def clean_outbox():
    locmem.reset()
    yield
    locmem.reset()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def sender(sleeps):
    """Sender over the in-memory backend; delays are recorded, not waited."""
    return NotificationSender(LocMemBackend(), send_delay=2.0, sleep=sleeps.append)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def basic_user(db):
    return User.objects.create_user(email='viewer@example.com', password='TestPass123!')


@pytest.fixture
def manager(db):
    return User.objects.create_user(email='manager@example.com', password='TestPass123!', role=Role.MANAGER)


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(email='admin@example.com', password='TestPass123!', role=Role.ADMIN)


@pytest.fixture
def viewer_client(basic_user):
    return _client_for(basic_user)


@pytest.fixture
def manager_client(manager):
    return _client_for(manager)


@pytest.fixture
def admin_client(admin_user):
    return _client_for(admin_user)


@pytest.fixture
def resident(db):
    return Resident.objects.create(
        name='Ana',
        last_name='Pérez',
        cedula='001-0000001-1',
        phone='809-555-0101',
        payment_status=ResidentPaymentStatus.PENDING,
        next_payment_date=date(2024, 3, 30),
    )


@pytest.fixture
def overdue_resident(db):
    resident = Resident.objects.create(
        name='Luis',
        last_name='Gómez',
        cedula='001-0000002-2',
        phone='(809) 555-0202',
        payment_status=ResidentPaymentStatus.OVERDUE,
        next_payment_date=date(2024, 2, 29),
    )
    Token.objects.create(
        resident=resident,
        name='Portón',
        payment_status=ResidentPaymentStatus.OVERDUE,
        next_payment_date=date(2024, 2, 29),
    )
    return resident


@pytest.fixture
def resident_without_phone(db):
    return Resident.objects.create(
        name='Marta',
        last_name='Ruiz',
        cedula='001-0000004-4',
        phone='',
        payment_status=ResidentPaymentStatus.PENDING,
        next_payment_date=date(2024, 3, 30),
    )
