from __future__ import annotations

import logging
import re
from typing import ClassVar

from ..errors import ConfigurationError, ValidationError
from ..models import ChannelType, Notification
from ..providers.base import Provider
from ..results import NotificationResult

LOGGER = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
# E.164: leading "+", a non-zero country code digit, then 1-14 further digits
E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")


def is_valid_email(value: str | None) -> bool:
    return bool(value) and EMAIL_PATTERN.fullmatch(value) is not None


def is_valid_phone(value: str | None) -> bool:
    return bool(value) and E164_PATTERN.fullmatch(value) is not None


class Channel:
    """A delivery medium bound to exactly one provider.

    ``supports`` is a pure predicate used during channel selection. ``send`` runs the
    validation pipeline (generic rules, channel rules, then the provider's vendor rules),
    collecting every violation before raising, and only then hands the notification to the
    provider.
    """

    type: ClassVar[ChannelType]

    def __init__(self, provider: Provider) -> None:
        if provider.channel is not self.type:
            raise ConfigurationError(
                f"Provider '{provider.name}' serves {provider.channel.name}, not {self.type.name}",
                channel=self.type,
                provider_name=provider.name,
            )
        self.provider = provider

    @property
    def provider_name(self) -> str:
        return self.provider.name

    def accepts(self, notification: Notification) -> bool:
        """Whether the notification's payload (if any) was written for this channel."""
        return notification.kind is None or notification.kind is self.type

    def matches_recipient(self, recipient: str) -> bool:
        raise NotImplementedError

    def supports(self, notification: Notification) -> bool:
        if not self.accepts(notification):
            return False
        return any(self.matches_recipient(recipient) for recipient in notification.recipients)

    def validate(self, notification: Notification) -> list[str]:
        errors = self._validate_generic(notification)
        if not self.accepts(notification):
            errors.append(f"{notification.kind.name} notification cannot be sent over {self.type.name}")
            return errors
        errors.extend(self._validate_channel(notification))
        errors.extend(self.provider.validate_format(notification))
        return errors

    def check(self, notification: Notification) -> None:
        errors = self.validate(notification)
        if errors:
            raise ValidationError(errors, channel=self.type, provider_name=self.provider.name)

    def prepare(self, notification: Notification) -> Notification:
        """Return the notification exactly as it should reach the provider."""
        return notification

    def send(self, notification: Notification) -> NotificationResult:
        self.check(notification)
        return self.deliver(notification)

    def deliver(self, notification: Notification) -> NotificationResult:
        """Deliver an already validated notification; provider errors propagate."""
        message_id = self.provider.deliver(self.prepare(notification))
        return NotificationResult.succeeded(
            self.type,
            self.provider.name,
            message_id,
            notification_id=notification.id,
        )

    def _validate_generic(self, notification: Notification) -> list[str]:
        errors: list[str] = []
        if not notification.recipients:
            errors.append("at least one recipient is required")
        if not notification.content.strip():
            errors.append("content must not be empty")
        return errors

    def _validate_channel(self, notification: Notification) -> list[str]:
        return []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(provider={self.provider.name!r})"
