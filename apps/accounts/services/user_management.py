"""
Account administration service.

Used by the admin-only user management endpoints.
"""

import logging
from uuid import UUID

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.accounts.models import Role
from .exceptions import UserNotFoundError, CannotDeactivateSelfError

logger = logging.getLogger(__name__)

User = get_user_model()


@transaction.atomic
def update_user_account(
    *,
    user_id: UUID,
    display_name: str = None,
    role: str = None,
    is_active: bool = None,
    password: str = None
) -> User:
    """
    Update another user's account. Only provided fields change.

    Raises:
        UserNotFoundError: If the user doesn't exist
    """
    try:
        user = User.objects.select_for_update().get(id=user_id)
    except User.DoesNotExist:
        raise UserNotFoundError(f"User with ID {user_id} not found")

    update_fields = []
    if display_name is not None:
        user.display_name = display_name
        update_fields.append('display_name')
    if role is not None:
        user.role = Role(role)
        update_fields.append('role')
    if is_active is not None:
        user.is_active = is_active
        update_fields.append('is_active')
    if password:
        user.set_password(password)
        update_fields.append('password')

    if update_fields:
        user.save(update_fields=update_fields)
        logger.info("Updated user %s: %s", user.email, ', '.join(update_fields))

    return user


@transaction.atomic
def deactivate_user(*, user_id: UUID, performed_by: User) -> User:
    """
    Deactivate an account instead of deleting it.

    Raises:
        UserNotFoundError: If the user doesn't exist
        CannotDeactivateSelfError: If an admin targets their own account
    """
    if str(user_id) == str(performed_by.id):
        raise CannotDeactivateSelfError("You cannot deactivate your own account")

    user = update_user_account(user_id=user_id, is_active=False)
    logger.info("User %s deactivated by %s", user.email, performed_by.email)
    return user
