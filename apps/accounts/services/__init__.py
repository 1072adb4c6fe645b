"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    UserNotFoundError,
    CannotDeactivateSelfError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user, issue_tokens
from .user_management import update_user_account, deactivate_user

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'UserRegistrationError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'UserNotFoundError',
    'CannotDeactivateSelfError',
    # Services
    'register_user',
    'authenticate_user',
    'issue_tokens',
    'update_user_account',
    'deactivate_user',
]
