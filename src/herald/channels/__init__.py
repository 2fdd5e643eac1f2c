"""Channels: the medium-level rules wrapped around a single provider."""

from __future__ import annotations

from ..models import ChannelType
from ..providers.base import Provider
from .base import Channel, is_valid_email, is_valid_phone
from .email import EmailChannel
from .push import PushChannel
from .sms import SmsChannel, truncate_message

CHANNEL_TYPES: dict[ChannelType, type[Channel]] = {
    ChannelType.EMAIL: EmailChannel,
    ChannelType.SMS: SmsChannel,
    ChannelType.PUSH: PushChannel,
}


def build_channel(provider: Provider) -> Channel:
    return CHANNEL_TYPES[provider.channel](provider)


__all__ = [
    "CHANNEL_TYPES",
    "Channel",
    "EmailChannel",
    "PushChannel",
    "SmsChannel",
    "build_channel",
    "is_valid_email",
    "is_valid_phone",
    "truncate_message",
]
