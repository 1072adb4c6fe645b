"""Access token management service."""

from django.db import transaction

from apps.residents.models import Resident, Token, TokenStatus

from .exceptions import ResidentNotFoundError, TokenNotFoundError


@transaction.atomic
def create_token(*, resident_id: int, name: str) -> Token:
    """
    Issue a token for a resident.

    The new token starts with a copy of the resident's payment fields so it
    mirrors the owner from the first moment.

    Raises:
        ResidentNotFoundError: If the resident doesn't exist
    """
    try:
        resident = Resident.objects.get(id=resident_id)
    except Resident.DoesNotExist:
        raise ResidentNotFoundError(f"Resident with ID {resident_id} not found")

    return Token.objects.create(
        resident=resident,
        name=name,
        status=TokenStatus.ACTIVE,
        payment_status=resident.payment_status,
        last_payment_date=resident.last_payment_date,
        next_payment_date=resident.next_payment_date,
    )


@transaction.atomic
def update_token(*, token_id: int, name: str = None, status: str = None) -> Token:
    """
    Rename or (de)activate a token.

    Payment fields are not editable here; they follow the resident.

    Raises:
        TokenNotFoundError: If the token doesn't exist
    """
    try:
        token = Token.objects.select_for_update().get(id=token_id)
    except Token.DoesNotExist:
        raise TokenNotFoundError(f"Token with ID {token_id} not found")

    update_fields = []
    if name is not None:
        token.name = name
        update_fields.append('name')
    if status is not None:
        token.status = TokenStatus(status)
        update_fields.append('status')

    if update_fields:
        token.save(update_fields=update_fields + ['updated_at'])

    return token


def delete_token(*, token_id: int) -> None:
    deleted, _ = Token.objects.filter(id=token_id).delete()
    if not deleted:
        raise TokenNotFoundError(f"Token with ID {token_id} not found")
