from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod

from ..config import ProviderConfig
from ..models import ChannelType, Notification
from ..utils import normalize_name, parse_bool

LOGGER = logging.getLogger(__name__)

DEFAULT_SMS_LENGTH = 160
DEFAULT_SENDER_ID_LENGTH = 11
DEFAULT_PUSH_PAYLOAD_BYTES = 4096


class Provider(ABC):
    """Vendor-specific delivery for one channel.

    Subclasses declare ``name`` and ``channel`` and implement :meth:`deliver`. Rules that
    only one vendor imposes go in :meth:`validate_format`; channel-wide rules live on the
    channel. Providers never mutate the notification they are given.
    """

    name: str = "provider"
    channel: ChannelType

    def __init__(self, config: ProviderConfig | None = None, *, name: str | None = None) -> None:
        self.config = config or ProviderConfig()
        if name:
            self.name = normalize_name(name)

    def is_configured(self) -> bool:
        return True

    def validate_format(self, notification: Notification) -> list[str]:
        return []

    @abstractmethod
    def deliver(self, notification: Notification) -> str:
        """Hand the notification to the vendor and return the vendor's message id."""

    def generate_message_id(self) -> str:
        return str(uuid.uuid4())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, channel={self.channel.name})"


class EmailProvider(Provider):
    channel = ChannelType.EMAIL
    max_recipients: int | None = None


class SmsProvider(Provider):
    channel = ChannelType.SMS
    max_message_length: int = DEFAULT_SMS_LENGTH
    supports_sender_id: bool = False
    max_sender_id_length: int = DEFAULT_SENDER_ID_LENGTH

    @property
    def truncate_overflow(self) -> bool:
        """Whether over-long bodies are cut with an ellipsis instead of rejected."""
        return parse_bool(self.config.get_property("truncate_overflow"), default=False)


class PushProvider(Provider):
    channel = ChannelType.PUSH
    min_token_length: int = 1
    max_token_length: int = 4096
    max_payload_bytes: int = DEFAULT_PUSH_PAYLOAD_BYTES
