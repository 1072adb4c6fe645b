"""
WhatsApp Cloud API backend.

Sends plain text messages through
``POST {WHATSAPP_API_URL}/{WHATSAPP_PHONE_NUMBER_ID}/messages`` with a bearer
token. The ``httpx.Client`` is created by ``open()`` and released by
``close()``; ``send_text`` on a closed backend opens it on demand.
"""

import logging

import httpx
from django.conf import settings

from .base import BaseNotificationBackend

logger = logging.getLogger(__name__)


class WhatsAppCloudBackend(BaseNotificationBackend):

    def __init__(self, api_url=None, phone_number_id=None, access_token=None, timeout=None, **kwargs):
        super().__init__(**kwargs)
        self.api_url = (api_url or settings.WHATSAPP_API_URL).rstrip('/')
        self.phone_number_id = phone_number_id or settings.WHATSAPP_PHONE_NUMBER_ID
        self.access_token = access_token or settings.WHATSAPP_ACCESS_TOKEN
        self.timeout = timeout or settings.WHATSAPP_TIMEOUT
        self.client = None

    @property
    def is_configured(self) -> bool:
        return bool(self.phone_number_id and self.access_token)

    @property
    def is_ready(self) -> bool:
        return self.client is not None and self.is_configured

    def open(self):
        if self.client is None:
            self.client = httpx.Client(
                timeout=self.timeout,
                headers={
                    'Authorization': f'Bearer {self.access_token}',
                    'Content-Type': 'application/json',
                },
            )

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None

    def status(self) -> dict:
        data = super().status()
        data['is_configured'] = self.is_configured
        return data

    def send_text(self, phone: str, message: str) -> bool:
        if not self.is_configured:
            logger.error("WhatsApp backend is not configured (phone number ID / access token missing)")
            return False

        self.open()
        payload = {
            'messaging_product': 'whatsapp',
            'to': phone,
            'type': 'text',
            'text': {'body': message},
        }

        try:
            response = self.client.post(f"{self.api_url}/{self.phone_number_id}/messages", json=payload)
        except httpx.TimeoutException:
            logger.warning("Timeout sending WhatsApp message to %s", phone)
            return False
        except httpx.RequestError as e:
            logger.warning("Connection error sending WhatsApp message to %s: %s", phone, e)
            return False

        if response.status_code not in (200, 201):
            logger.warning(
                "WhatsApp API rejected message to %s: %s %s",
                phone, response.status_code, response.text[:200]
            )
            return False

        logger.info("WhatsApp message sent to %s", phone)
        return True
