from __future__ import annotations

import logging
import re
import uuid

from ..logging_utils import describe_recipients
from ..models import Notification
from .base import SmsProvider

LOGGER = logging.getLogger(__name__)

# Twilio only accepts full E.164 numbers as the originating address.
_TWILIO_SENDER_PATTERN = re.compile(r"^\+[1-9]\d{6,14}$")


class TwilioProvider(SmsProvider):
    """Twilio Messages resource (simulated).

    Message SIDs are ``"SM"`` followed by 32 hex characters.
    """

    name = "twilio"
    max_message_length = 1600

    def is_configured(self) -> bool:
        return self.config.has("account_id", "auth_token")

    def validate_format(self, notification: Notification) -> list[str]:
        sender = notification.sms.sender
        if sender and not _TWILIO_SENDER_PATTERN.fullmatch(sender):
            return [f"invalid sender phone number for twilio: {sender}"]
        return []

    def deliver(self, notification: Notification) -> str:
        LOGGER.info("[simulated] Twilio sending SMS to %s", describe_recipients(notification.recipients))
        LOGGER.debug("[simulated] Message length: %d characters", len(notification.content))
        return "SM" + uuid.uuid4().hex


class VonageProvider(SmsProvider):
    """Vonage SMS API (simulated); supports alphanumeric sender ids."""

    name = "vonage"
    max_message_length = 1000
    supports_sender_id = True

    def is_configured(self) -> bool:
        return self.config.has("api_key", "api_secret")

    def deliver(self, notification: Notification) -> str:
        options = notification.sms
        LOGGER.info("[simulated] Vonage sending SMS to %s", describe_recipients(notification.recipients))
        LOGGER.debug("[simulated] Sender: %s", options.sender_id or options.sender)
        return self.generate_message_id()
