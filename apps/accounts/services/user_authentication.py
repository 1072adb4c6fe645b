"""
Operator authentication.

Dashboard operators sign in with email and password and receive a JWT pair.
The access token carries the operator's ``role`` claim so clients can hide
actions the role cannot perform; permissions are still checked server side.
"""

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.models import update_last_login
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import InvalidCredentialsError, InactiveAccountError

logger = logging.getLogger(__name__)

User = get_user_model()


def authenticate_user(*, email: str, password: str) -> User:
    """
    Check an operator's credentials and stamp ``last_login``.

    Raises:
        InvalidCredentialsError: Unknown email or wrong password
        InactiveAccountError: The account was deactivated by an admin
    """
    user = User.objects.filter(email__iexact=email).first()
    if user is None or not user.check_password(password):
        logger.warning("Failed login for %s", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    update_last_login(None, user)
    return user


def issue_tokens(user: User) -> dict:
    """Refresh/access pair with the ``role`` claim."""
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    return {
        'refresh': str(refresh),
        'access': str(refresh.access_token),
    }
