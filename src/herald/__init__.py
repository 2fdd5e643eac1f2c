"""Herald: one API for sending email, SMS and push notifications.

The package is organized into focused modules:

- **models**: ``Notification`` and the per-channel payloads (``email()``, ``sms()``, ``push()``)
- **results**: ``NotificationResult``, the uniform outcome of every send
- **providers**: vendor implementations (SendGrid, Mailgun, Twilio, Vonage, Firebase, APNs)
- **channels**: channel-wide validation and recipient matching around one provider
- **registry**: ``ProviderRegistry``, the (channel, name) -> provider table with defaults
- **dispatcher**: ``Dispatcher``, channel selection plus sync, async and batch sending
- **config** / **validation**: YAML configuration loading and checking

The main entry point is the ``Dispatcher`` class.
"""

from .config import DispatcherSettings, ProviderConfig, build_registry, load_config
from .dispatcher import Dispatcher
from .errors import (
    ConfigurationError,
    DispatcherClosedError,
    NotificationError,
    ProviderError,
    SendError,
    ValidationError,
)
from .models import (
    Attachment,
    ChannelType,
    EmailOptions,
    Notification,
    Priority,
    PushOptions,
    SmsOptions,
    email,
    push,
    sms,
)
from .registry import ProviderRegistry
from .results import NotificationResult

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Attachment",
    "ChannelType",
    "ConfigurationError",
    "Dispatcher",
    "DispatcherClosedError",
    "DispatcherSettings",
    "EmailOptions",
    "Notification",
    "NotificationError",
    "NotificationResult",
    "Priority",
    "ProviderConfig",
    "ProviderError",
    "ProviderRegistry",
    "PushOptions",
    "SendError",
    "SmsOptions",
    "ValidationError",
    "build_registry",
    "email",
    "load_config",
    "push",
    "sms",
]
