"""
Residents app services layer.

Services contain business logic and orchestrate operations across models.
"""

from .exceptions import (
    ResidentsServiceError,
    ResidentNotFoundError,
    DuplicateCedulaError,
    TokenNotFoundError,
)

from .resident_management import (
    get_resident_by_id,
    create_resident,
    bulk_create_residents,
    update_resident,
    delete_resident,
)

from .token_management import (
    create_token,
    update_token,
    delete_token,
)


__all__ = [
    # Exceptions
    'ResidentsServiceError',
    'ResidentNotFoundError',
    'DuplicateCedulaError',
    'TokenNotFoundError',

    # Resident Management
    'get_resident_by_id',
    'create_resident',
    'bulk_create_residents',
    'update_resident',
    'delete_resident',

    # Token Management
    'create_token',
    'update_token',
    'delete_token',
]
