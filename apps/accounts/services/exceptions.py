"""
Domain-specific exceptions for operator accounts.

    UserRegistrationError      -> 400
    InvalidCredentialsError    -> 401
    InactiveAccountError       -> 403
    UserNotFoundError          -> 404
    CannotDeactivateSelfError  -> 400
"""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""


class UserRegistrationError(AccountsServiceError):
    """Email already registered or unknown role."""


class InvalidCredentialsError(AccountsServiceError):
    pass


class InactiveAccountError(AccountsServiceError):
    """Login attempted on an account an admin deactivated."""


class UserNotFoundError(AccountsServiceError):
    pass


class CannotDeactivateSelfError(AccountsServiceError):
    """An admin may not lock themselves out."""
