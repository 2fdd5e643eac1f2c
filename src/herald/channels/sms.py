from __future__ import annotations

import logging

from ..models import ChannelType, Notification
from ..providers.base import SmsProvider
from .base import Channel, is_valid_phone

LOGGER = logging.getLogger(__name__)

ELLIPSIS = "..."


def truncate_message(content: str, limit: int) -> str:
    """Cut ``content`` to ``limit`` characters, ending with an ellipsis when shortened."""
    if len(content) <= limit:
        return content
    if limit <= len(ELLIPSIS):
        return content[:limit]
    return content[: limit - len(ELLIPSIS)] + ELLIPSIS


class SmsChannel(Channel):
    type = ChannelType.SMS
    provider: SmsProvider

    def matches_recipient(self, recipient: str) -> bool:
        return is_valid_phone(recipient)

    def _validate_channel(self, notification: Notification) -> list[str]:
        provider = self.provider
        errors = [
            f"invalid E.164 phone number for recipient: {recipient} (expected e.g. +5491155551234)"
            for recipient in notification.recipients
            if not is_valid_phone(recipient)
        ]
        length = len(notification.content)
        if length > provider.max_message_length and not provider.truncate_overflow:
            errors.append(
                f"message exceeds maximum length of {provider.max_message_length} characters "
                f"for {provider.name} ({length} characters)"
            )
        sender_id = notification.sms.sender_id
        if sender_id and provider.supports_sender_id and len(sender_id) > provider.max_sender_id_length:
            errors.append(f"sender id must be {provider.max_sender_id_length} characters or fewer: {sender_id}")
        return errors

    def prepare(self, notification: Notification) -> Notification:
        limit = self.provider.max_message_length
        if len(notification.content) <= limit:
            return notification
        LOGGER.warning(
            "SMS %s truncated from %d to %d characters for %s",
            notification.id,
            len(notification.content),
            limit,
            self.provider.name,
        )
        return notification.with_content(truncate_message(notification.content, limit))
