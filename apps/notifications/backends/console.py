"""Development backend: writes messages to the log instead of sending them."""

import logging

from .base import BaseNotificationBackend

logger = logging.getLogger(__name__)


class ConsoleBackend(BaseNotificationBackend):

    @property
    def is_ready(self) -> bool:
        return True

    def send_text(self, phone: str, message: str) -> bool:
        logger.info("WhatsApp to %s:\n%s", phone, message)
        return True
