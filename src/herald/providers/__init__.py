"""Delivery providers, one class per vendor.

The bundled providers are stand-ins for the vendor SDKs: they validate vendor-specific
rules and synthesize a vendor-shaped message id, but never open a network connection.
"""

from __future__ import annotations

from ..config import ProviderConfig
from ..errors import ConfigurationError
from ..utils import normalize_name
from .base import EmailProvider, Provider, PushProvider, SmsProvider
from .email import MailgunProvider, SendGridProvider
from .push import ApnsProvider, FirebaseProvider
from .sms import TwilioProvider, VonageProvider

PROVIDER_TYPES: dict[str, type[Provider]] = {
    "sendgrid": SendGridProvider,
    "mailgun": MailgunProvider,
    "twilio": TwilioProvider,
    "vonage": VonageProvider,
    "firebase": FirebaseProvider,
    "apns": ApnsProvider,
}


def create_provider(provider_type: str, config: ProviderConfig | None = None, *, name: str | None = None) -> Provider:
    """Instantiate the provider registered under ``provider_type``."""
    provider_cls = PROVIDER_TYPES.get(normalize_name(provider_type))
    if provider_cls is None:
        known = ", ".join(sorted(PROVIDER_TYPES))
        raise ConfigurationError(f"Unknown provider type '{provider_type}' (expected one of: {known})")
    return provider_cls(config, name=name)


__all__ = [
    "PROVIDER_TYPES",
    "ApnsProvider",
    "EmailProvider",
    "FirebaseProvider",
    "MailgunProvider",
    "Provider",
    "PushProvider",
    "SendGridProvider",
    "SmsProvider",
    "TwilioProvider",
    "VonageProvider",
    "create_provider",
]
