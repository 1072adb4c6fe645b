"""
Resident management service.

Registration sets the initial payment state (pending, due at the end of the
current billing cycle). Later payment-state changes belong to
``apps.payments.services.PaymentStatusEngine``; ``update_resident`` only
touches identity and contact fields.
"""

import logging
from datetime import date
from typing import Iterable, List

from django.db import transaction, IntegrityError
from django.utils import timezone

from apps.payments.billing import end_of_billing_cycle
from apps.residents.models import Resident, ResidentPaymentStatus

from .exceptions import ResidentNotFoundError, DuplicateCedulaError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'name',
    'last_name',
    'cedula',
    'registration_number',
    'phone',
    'address',
    'whatsapp_consent',
)


def get_resident_by_id(*, resident_id: int) -> Resident:
    try:
        return Resident.objects.get(id=resident_id)
    except Resident.DoesNotExist:
        raise ResidentNotFoundError(f"Resident with ID {resident_id} not found")


@transaction.atomic
def create_resident(
    *,
    name: str,
    last_name: str,
    cedula: str,
    registration_number: str = '',
    phone: str = '',
    address: str = '',
    whatsapp_consent: bool = True,
    today: date = None
) -> Resident:
    """
    Register a resident in the initial ``pending`` state.

    Args:
        today: Registration date; defaults to the current local date.
            ``next_payment_date`` becomes the end of that date's cycle.

    Returns:
        Created Resident instance

    Raises:
        DuplicateCedulaError: If the cedula is already registered
    """
    today = today or timezone.localdate()

    if Resident.objects.filter(cedula=cedula).exists():
        raise DuplicateCedulaError(f"A resident with cedula {cedula} already exists")

    try:
        resident = Resident.objects.create(
            name=name,
            last_name=last_name,
            cedula=cedula,
            registration_number=registration_number,
            phone=phone,
            address=address,
            whatsapp_consent=whatsapp_consent,
            payment_status=ResidentPaymentStatus.PENDING,
            next_payment_date=end_of_billing_cycle(today.year, today.month),
        )
    except IntegrityError:
        raise DuplicateCedulaError(f"A resident with cedula {cedula} already exists")

    logger.info("Registered resident %s (next payment %s)", resident.id, resident.next_payment_date)
    return resident


def bulk_create_residents(*, rows: Iterable[dict], today: date = None) -> dict:
    """
    Create residents row by row.

    A failing row (duplicate cedula, missing field) is counted and skipped;
    it never aborts the upload.

    Returns:
        dict with ``inserted``, ``errors`` and per-row ``error_details``
    """
    inserted = 0
    error_details: List[dict] = []

    for index, row in enumerate(rows):
        try:
            create_resident(
                name=str(row['name']),
                last_name=str(row['last_name']),
                cedula=str(row['cedula']),
                registration_number=str(row.get('registration_number') or ''),
                phone=str(row.get('phone') or ''),
                address=str(row.get('address') or ''),
                today=today,
            )
            inserted += 1
        except KeyError as e:
            logger.warning("Bulk upload row %s missing field %s", index, e)
            error_details.append({'row': index, 'error': f"Missing field: {e.args[0]}"})
        except DuplicateCedulaError as e:
            logger.warning("Bulk upload row %s rejected: %s", index, e)
            error_details.append({'row': index, 'error': str(e)})

    return {
        'inserted': inserted,
        'errors': len(error_details),
        'error_details': error_details,
    }


@transaction.atomic
def update_resident(*, resident_id: int, **fields) -> Resident:
    """
    Update identity/contact fields of a resident.

    Unknown keys and payment-state fields are ignored.

    Raises:
        ResidentNotFoundError: If the resident doesn't exist
        DuplicateCedulaError: If the new cedula belongs to another resident
    """
    try:
        resident = Resident.objects.select_for_update().get(id=resident_id)
    except Resident.DoesNotExist:
        raise ResidentNotFoundError(f"Resident with ID {resident_id} not found")

    new_cedula = fields.get('cedula')
    if new_cedula and new_cedula != resident.cedula:
        if Resident.objects.filter(cedula=new_cedula).exclude(id=resident.id).exists():
            raise DuplicateCedulaError(f"A resident with cedula {new_cedula} already exists")

    update_fields = []
    for field in EDITABLE_FIELDS:
        if field in fields and fields[field] is not None:
            setattr(resident, field, fields[field])
            update_fields.append(field)

    if update_fields:
        resident.save(update_fields=update_fields + ['updated_at'])

    return resident


@transaction.atomic
def delete_resident(*, resident_id: int) -> None:
    """Delete a resident together with its payments, tokens and notifications."""
    deleted, _ = Resident.objects.filter(id=resident_id).delete()
    if not deleted:
        raise ResidentNotFoundError(f"Resident with ID {resident_id} not found")
    logger.info("Deleted resident %s and dependent records", resident_id)
