"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from apps.accounts.models import Role
from .exceptions import UserRegistrationError

logger = logging.getLogger(__name__)

User = get_user_model()


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = "",
    role: str = Role.USER
) -> User:
    """
    Create a dashboard account.

    Self-registration always goes through with the default ``user`` role;
    admins creating accounts may pass any role.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name
        role: One of ``Role`` values

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is taken or the role is unknown
    """
    if role not in Role.values:
        raise UserRegistrationError(f"Unknown role: {role}")

    if User.objects.filter(email__iexact=email).exists():
        raise UserRegistrationError("A user with this email already exists")

    try:
        user = User.objects.create_user(
            email=email,
            password=password,
            display_name=display_name,
            role=role,
        )
    except IntegrityError:
        raise UserRegistrationError("A user with this email already exists")

    logger.info("Registered user %s with role %s", user.email, user.role)
    return user
