"""
Pluggable message delivery backends.

The active backend is chosen by the ``NOTIFICATIONS_BACKEND`` setting, the
same way Django picks an email backend:

    NOTIFICATIONS_BACKEND = 'apps.notifications.backends.whatsapp.WhatsAppCloudBackend'
"""

from django.conf import settings
from django.utils.module_loading import import_string

from .base import BaseNotificationBackend

DEFAULT_BACKEND = 'apps.notifications.backends.console.ConsoleBackend'


def get_backend(backend=None, **kwargs) -> BaseNotificationBackend:
    """Instantiate ``backend`` (dotted path) or the configured default."""
    klass = import_string(backend or getattr(settings, 'NOTIFICATIONS_BACKEND', DEFAULT_BACKEND))
    return klass(**kwargs)


__all__ = ['BaseNotificationBackend', 'get_backend']
