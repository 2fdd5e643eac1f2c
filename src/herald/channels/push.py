from __future__ import annotations

import re

from ..models import ChannelType, Notification
from ..providers.base import PushProvider
from .base import Channel

_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_:.\-]+$")
# Without a push payload a recipient is only taken for a device token when it is long
# enough not to be confused with a user name or short code.
MIN_GUESSED_TOKEN_LENGTH = 32


class PushChannel(Channel):
    type = ChannelType.PUSH
    provider: PushProvider

    def matches_recipient(self, recipient: str) -> bool:
        return _TOKEN_PATTERN.fullmatch(recipient) is not None

    def supports(self, notification: Notification) -> bool:
        if not self.accepts(notification):
            return False
        min_length = 1 if notification.kind is ChannelType.PUSH else MIN_GUESSED_TOKEN_LENGTH
        return any(
            self.matches_recipient(token) and len(token) >= min_length for token in notification.recipients
        )

    def _validate_generic(self, notification: Notification) -> list[str]:
        errors: list[str] = []
        if not notification.recipients:
            errors.append("at least one recipient is required")
        if not notification.content.strip() and not (notification.title or "").strip():
            errors.append("content must not be empty when no title is given")
        return errors

    def _validate_channel(self, notification: Notification) -> list[str]:
        provider = self.provider
        options = notification.push
        errors: list[str] = []
        for token in notification.recipients:
            if not provider.min_token_length <= len(token) <= provider.max_token_length:
                errors.append(
                    f"device token length {len(token)} is outside the accepted range "
                    f"{provider.min_token_length}-{provider.max_token_length} for {provider.name}"
                )
            elif not self.matches_recipient(token):
                errors.append(f"device token contains invalid characters: {token[:12]}...")
        if options.badge is not None and options.badge < 0:
            errors.append(f"badge must be greater than or equal to 0 (got {options.badge})")
        if options.ttl_seconds is not None and options.ttl_seconds < 0:
            errors.append(f"ttl must be greater than or equal to 0 (got {options.ttl_seconds})")
        size = options.data_size
        if size > provider.max_payload_bytes:
            errors.append(f"data payload exceeds {provider.max_payload_bytes} bytes ({size} bytes)")
        return errors
