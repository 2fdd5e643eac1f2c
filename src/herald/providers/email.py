from __future__ import annotations

import logging
import secrets
import uuid

from ..logging_utils import describe_recipients
from ..models import Notification
from .base import EmailProvider

LOGGER = logging.getLogger(__name__)

# Mailgun rejects messages larger than 25 MB including attachments.
MAILGUN_MAX_MESSAGE_BYTES = 25 * 1024 * 1024


class SendGridProvider(EmailProvider):
    """SendGrid v3 mail-send.

    Delivery is simulated: no request leaves the process. A live client would POST to
    ``/v3/mail/send`` and read the ``X-Message-Id`` response header.
    """

    name = "sendgrid"
    max_recipients = 1000  # personalizations limit

    def is_configured(self) -> bool:
        return self.config.has("api_key")

    def validate_format(self, notification: Notification) -> list[str]:
        options = notification.email
        total = len(notification.recipients) + len(options.cc) + len(options.bcc)
        if self.max_recipients is not None and total > self.max_recipients:
            return [f"too many recipients for sendgrid: {total} (maximum {self.max_recipients})"]
        return []

    def deliver(self, notification: Notification) -> str:
        LOGGER.info("[simulated] SendGrid sending email to %s", describe_recipients(notification.recipients))
        LOGGER.debug("[simulated] Subject: %s | From: %s", notification.subject, notification.email.sender)
        message_id = secrets.token_urlsafe(16)[:22]
        LOGGER.debug("[simulated] SendGrid accepted message %s", message_id)
        return message_id


class MailgunProvider(EmailProvider):
    """Mailgun messages API (simulated)."""

    name = "mailgun"

    @property
    def domain(self) -> str | None:
        return self.config.get_property("domain")

    def is_configured(self) -> bool:
        return self.config.has("api_key", "domain")

    def validate_format(self, notification: Notification) -> list[str]:
        size = len(notification.content.encode("utf-8"))
        size += sum(attachment.size for attachment in notification.email.attachments)
        if size > MAILGUN_MAX_MESSAGE_BYTES:
            return [f"message exceeds the mailgun size limit of {MAILGUN_MAX_MESSAGE_BYTES} bytes ({size} bytes)"]
        return []

    def deliver(self, notification: Notification) -> str:
        LOGGER.info(
            "[simulated] Mailgun sending email to %s via %s",
            describe_recipients(notification.recipients),
            self.domain,
        )
        return f"<{uuid.uuid4()}@{self.domain or 'mailgun.local'}>"
