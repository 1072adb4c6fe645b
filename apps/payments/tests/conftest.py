import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Role
from apps.notifications.backends import locmem
from apps.notifications.backends.locmem import LocMemBackend
from apps.notifications.services import NotificationSender
from apps.payments.services import PaymentStatusEngine
from apps.residents.models import Resident, Token, ResidentPaymentStatus
from apps.residents.services import create_resident


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture(autouse=True)
def clean_outbox():
    """Empty the in-memory WhatsApp outbox around every test."""
    locmem.reset()
    yield
    locmem.reset()


@pytest.fixture
def sleeps():
    """Records every delay requested by the engine."""
    return []


@pytest.fixture
def engine(sleeps):
    """Engine over the in-memory backend with a recorded 2 second delay."""
    return PaymentStatusEngine(
        NotificationSender(LocMemBackend()),
        send_delay=2.0,
        sleep=sleeps.append,
    )


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
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
    """Resident registered on 2024-03-10: pending, due 2024-03-30."""
    return create_resident(
        name='Ana',
        last_name='Pérez',
        cedula='001-0000001-1',
        phone='809-555-0101',
        today=date(2024, 3, 10),
    )


@pytest.fixture
def resident_token(resident):
    return Token.objects.create(
        resident=resident,
        name='Portón',
        payment_status=resident.payment_status,
        next_payment_date=resident.next_payment_date,
    )


@pytest.fixture
def february_debtor(db):
    """Pending resident whose February cycle closed unpaid."""
    return Resident.objects.create(
        name='Luis',
        last_name='Gómez',
        cedula='001-0000002-2',
        phone='809-555-0202',
        payment_status=ResidentPaymentStatus.PENDING,
        next_payment_date=date(2024, 2, 29),
    )


@pytest.fixture
def paid_resident(db):
    return Resident.objects.create(
        name='Carla',
        last_name='Díaz',
        cedula='001-0000003-3',
        phone='809-555-0303',
        payment_status=ResidentPaymentStatus.PAID,
        next_payment_date=date(2024, 2, 29),
    )
