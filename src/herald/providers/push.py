from __future__ import annotations

import logging
import re
import uuid

from ..models import Notification
from .base import PushProvider

LOGGER = logging.getLogger(__name__)

_HEX_TOKEN = re.compile(r"^[0-9a-fA-F]+$")


class FirebaseProvider(PushProvider):
    """Firebase Cloud Messaging ``messages:send`` (simulated)."""

    name = "firebase"
    # FCM registration tokens are typically 140-200 characters long
    min_token_length = 100
    max_token_length = 300

    @property
    def project_id(self) -> str:
        return self.config.get_property("project_id", "demo-project")

    def is_configured(self) -> bool:
        return self.config.has("api_key") or self.config.has("service_account_path")

    def deliver(self, notification: Notification) -> str:
        LOGGER.info(
            "[simulated] Firebase sending push to %d device(s) in %s",
            len(notification.recipients),
            self.project_id,
        )
        LOGGER.debug("[simulated] Title: %s | Body: %s", notification.title, notification.content)
        return f"projects/{self.project_id}/messages/{uuid.uuid4()}"


class ApnsProvider(PushProvider):
    """Apple Push Notification service (simulated)."""

    name = "apns"
    min_token_length = 64
    max_token_length = 64

    def is_configured(self) -> bool:
        return self.config.has("team_id", "key_id")

    def validate_format(self, notification: Notification) -> list[str]:
        errors = []
        for token in notification.recipients:
            if not _HEX_TOKEN.fullmatch(token):
                errors.append(f"device token must be hexadecimal for apns: {token[:12]}...")
        if not notification.push.topic:
            errors.append("topic (bundle id) is required for apns")
        return errors

    def deliver(self, notification: Notification) -> str:
        options = notification.push
        LOGGER.info("[simulated] APNs sending push to %d device(s)", len(notification.recipients))
        LOGGER.debug("[simulated] Badge: %s | Sound: %s", options.badge, options.sound)
        return str(uuid.uuid4()).upper()
