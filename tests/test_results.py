from __future__ import annotations

import datetime as dt

import pytest

from herald.errors import ProviderError, ValidationError
from herald.models import ChannelType
from herald.results import NotificationResult


def test_succeeded_populates_message_id_only() -> None:
    result = NotificationResult.succeeded(ChannelType.SMS, "twilio", "SM123", notification_id="n-1")
    assert result.success is True
    assert result.is_failure is False
    assert result.message_id == "SM123"
    assert result.error_message is None
    assert result.error_code is None
    assert result.notification_id == "n-1"
    assert result.timestamp.tzinfo is not None


def test_failure_populates_error_only() -> None:
    result = NotificationResult.failure(ChannelType.EMAIL, "sendgrid", "boom", "E42")
    assert result.success is False
    assert result.is_failure is True
    assert result.message_id is None
    assert result.error_message == "boom"
    assert result.error_code == "E42"


def test_result_rejects_inconsistent_state() -> None:
    with pytest.raises(ValueError):
        NotificationResult(success=True, channel=ChannelType.SMS, provider_name="twilio")
    with pytest.raises(ValueError):
        NotificationResult(success=False, channel=ChannelType.SMS, provider_name="twilio", message_id="SM1", error_message="x")
    with pytest.raises(ValueError):
        NotificationResult(success=False, channel=ChannelType.SMS, provider_name="twilio")


def test_from_exception_uses_exception_kind_as_code() -> None:
    result = NotificationResult.from_exception(ChannelType.PUSH, "firebase", RuntimeError("socket closed"))
    assert result.error_code == "RuntimeError"
    assert result.error_message == "socket closed"


def test_from_exception_prefers_vendor_error_code() -> None:
    exc = ProviderError("rate limited", error_code="429")
    result = NotificationResult.from_exception(ChannelType.SMS, "twilio", exc)
    assert result.error_code == "429"


def test_from_exception_without_channel_for_selection_failures() -> None:
    result = NotificationResult.from_exception(None, None, ValidationError("no compatible channel found for recipients"))
    assert result.channel is None
    assert result.provider_name is None
    assert result.error_code == "ValidationError"


def test_timestamps_never_decrease() -> None:
    stamps = [NotificationResult.succeeded(ChannelType.SMS, "twilio", f"SM{i}").timestamp for i in range(200)]
    assert stamps == sorted(stamps)


def test_to_dict_is_json_friendly() -> None:
    result = NotificationResult.succeeded(ChannelType.EMAIL, "sendgrid", "abc", notification_id="n-9")
    data = result.to_dict()
    assert data["channel"] == "email"
    assert data["provider"] == "sendgrid"
    assert data["message_id"] == "abc"
    assert dt.datetime.fromisoformat(data["timestamp"]) == result.timestamp


def test_validation_error_collects_messages() -> None:
    exc = ValidationError(["first", "second"])
    assert exc.errors == ["first", "second"]
    assert str(exc) == "first; second"
    assert exc.has_errors
