from __future__ import annotations

from herald.errors import (
    ConfigurationError,
    DispatcherClosedError,
    NotificationError,
    ProviderError,
    SendError,
    ValidationError,
)
from herald.models import ChannelType


def test_hierarchy() -> None:
    assert issubclass(ValidationError, NotificationError)
    assert issubclass(ConfigurationError, NotificationError)
    assert issubclass(DispatcherClosedError, ConfigurationError)
    assert SendError is ProviderError


def test_error_context_is_kept() -> None:
    exc = ProviderError("rate limited", channel=ChannelType.SMS, provider_name="twilio", error_code="429")
    assert exc.message == "rate limited"
    assert exc.channel is ChannelType.SMS
    assert exc.provider_name == "twilio"
    assert exc.error_code == "429"


def test_validation_error_accepts_single_message() -> None:
    exc = ValidationError("subject is required for email", channel=ChannelType.EMAIL)
    assert exc.errors == ["subject is required for email"]
    assert exc.channel is ChannelType.EMAIL
    assert exc.error_code is None
