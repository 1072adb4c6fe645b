import pytest
from datetime import date
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Role
from apps.notifications.backends import locmem
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
def viewer_client(basic_user):
    """API client for a read-only user."""
    return _client_for(basic_user)


@pytest.fixture
def manager_client(manager):
    return _client_for(manager)


@pytest.fixture
def resident(db):
    """A pending resident registered on 2024-03-10."""
    return create_resident(
        name='Ana',
        last_name='Pérez',
        cedula='001-0000001-1',
        registration_number='A-101',
        phone='809-555-0101',
        address='Calle 1 #10',
        today=date(2024, 3, 10),
    )


@pytest.fixture
def resident_without_consent(db):
    return create_resident(
        name='Luis',
        last_name='Gómez',
        cedula='001-0000002-2',
        phone='809-555-0202',
        whatsapp_consent=False,
        today=date(2024, 3, 10),
    )


@pytest.fixture
def paid_resident(db):
    return Resident.objects.create(
        name='Carla',
        last_name='Díaz',
        cedula='001-0000003-3',
        phone='809-555-0303',
        payment_status=ResidentPaymentStatus.PAID,
        next_payment_date=date(2024, 4, 30),
    )


@pytest.fixture
def token(resident):
    return Token.objects.create(resident=resident, name='Portón principal')
