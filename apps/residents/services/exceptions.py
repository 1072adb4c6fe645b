"""
Domain-specific exceptions for residents app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class ResidentsServiceError(Exception):
    """Base exception for all residents service errors."""
    pass


class ResidentNotFoundError(ResidentsServiceError):
    """Raised when a resident does not exist."""
    pass


class DuplicateCedulaError(ResidentsServiceError):
    """Raised when another resident already uses the national ID."""
    pass


class TokenNotFoundError(ResidentsServiceError):
    """Raised when an access token does not exist."""
    pass
