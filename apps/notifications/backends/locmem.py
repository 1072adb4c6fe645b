"""
In-memory backend for tests.

Delivered messages accumulate in the module-level ``outbox`` list as
``(phone, message)`` tuples. Phones listed in ``fail_for`` are reported as
undeliverable; phones in ``raise_for`` make ``send_text`` raise, standing in
for an unexpected transport crash.
"""

from .base import BaseNotificationBackend

outbox = []
fail_for = set()
raise_for = set()


def reset():
    outbox.clear()
    fail_for.clear()
    raise_for.clear()


class LocMemBackend(BaseNotificationBackend):

    @property
    def is_ready(self) -> bool:
        return True

    def send_text(self, phone: str, message: str) -> bool:
        if phone in raise_for:
            raise ConnectionError(f"Simulated transport failure for {phone}")
        if phone in fail_for:
            return False
        outbox.append((phone, message))
        return True
