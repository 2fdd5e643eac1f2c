"""Lookup table of (channel, provider name) -> provider, plus one default per channel."""

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Mapping

from .channels import Channel, build_channel
from .errors import ConfigurationError
from .models import ChannelType
from .providers.base import Provider
from .utils import normalize_name

LOGGER = logging.getLogger(__name__)


class ProviderRegistry:
    """Registry of providers, keyed case-insensitively by name within each channel.

    The first provider registered for a channel becomes its default. Lookups never
    take the lock: every mutation publishes fresh immutable snapshots, so readers on
    worker threads always see a consistent table. Mutations are serialised with each
    other but are meant for setup time, not for use while sends are in flight.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._providers: Mapping[ChannelType, Mapping[str, Provider]] = MappingProxyType({})
        self._channels: Mapping[tuple[ChannelType, str], Channel] = MappingProxyType({})
        self._defaults: Mapping[ChannelType, str] = MappingProxyType({})

    def register(self, provider: Provider, *, replace: bool = False) -> ProviderRegistry:
        """Bind ``provider`` under ``(provider.channel, provider.name)``.

        Registering a second provider under an existing pair raises
        :class:`ConfigurationError` unless ``replace`` is set.
        """
        channel = provider.channel
        name = normalize_name(provider.name)
        if not name:
            raise ConfigurationError("Provider name must not be blank", channel=channel)
        channel_obj = build_channel(provider)

        with self._lock:
            providers = {key: dict(value) for key, value in self._providers.items()}
            channel_providers = providers.setdefault(channel, {})
            if name in channel_providers:
                if not replace:
                    raise ConfigurationError(
                        f"Provider '{name}' is already registered for channel {channel.name}",
                        channel=channel,
                        provider_name=name,
                    )
                LOGGER.warning("Replacing provider '%s' registered for channel %s", name, channel.name)
            channel_providers[name] = provider

            channels = dict(self._channels)
            channels[(channel, name)] = channel_obj
            defaults = dict(self._defaults)
            defaults.setdefault(channel, name)

            self._providers = MappingProxyType({key: MappingProxyType(value) for key, value in providers.items()})
            self._channels = MappingProxyType(channels)
            self._defaults = MappingProxyType(defaults)

        LOGGER.debug("Registered provider %s for channel %s", name, channel.name)
        return self

    def set_default(self, channel: ChannelType, provider_name: str) -> ProviderRegistry:
        channel = ChannelType.parse(channel)
        name = normalize_name(provider_name)
        with self._lock:
            if not self.has_provider(channel, name):
                raise ConfigurationError(
                    f"Cannot set default: provider '{provider_name}' is not registered for channel {channel.name}",
                    channel=channel,
                    provider_name=provider_name,
                )
            defaults = dict(self._defaults)
            defaults[channel] = name
            self._defaults = MappingProxyType(defaults)
        return self

    def get_provider(self, channel: ChannelType, provider_name: str) -> Provider | None:
        channel = ChannelType.parse(channel)
        return self._providers.get(channel, {}).get(normalize_name(provider_name))

    def get_default_provider(self, channel: ChannelType) -> Provider | None:
        channel = ChannelType.parse(channel)
        name = self._defaults.get(channel)
        if name is None:
            return None
        return self.get_provider(channel, name)

    def default_name(self, channel: ChannelType) -> str | None:
        return self._defaults.get(ChannelType.parse(channel))

    def has_provider(self, channel: ChannelType, provider_name: str) -> bool:
        return self.get_provider(channel, provider_name) is not None

    def provider_names(self, channel: ChannelType) -> list[str]:
        return list(self._providers.get(ChannelType.parse(channel), {}))

    def providers(self, channel: ChannelType) -> Mapping[str, Provider]:
        return self._providers.get(ChannelType.parse(channel), MappingProxyType({}))

    def channels(self) -> list[ChannelType]:
        """Channels that have at least one provider, in first-registration order."""
        return list(self._providers)

    def get_channel(self, channel: ChannelType, provider_name: str | None = None) -> Channel | None:
        """The channel bound to ``provider_name``, or to the channel's default provider."""
        channel = ChannelType.parse(channel)
        name = normalize_name(provider_name) if provider_name else self._defaults.get(channel)
        if name is None:
            return None
        return self._channels.get((channel, name))

    def find_provider(self, provider_name: str) -> Provider | None:
        """First provider with this name, scanning channels in registration order."""
        name = normalize_name(provider_name)
        for providers in self._providers.values():
            if name in providers:
                return providers[name]
        return None

    def __len__(self) -> int:
        return sum(len(providers) for providers in self._providers.values())

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, tuple) or len(item) != 2:
            return False
        channel, name = item
        return isinstance(channel, ChannelType) and isinstance(name, str) and self.has_provider(channel, name)
