from __future__ import annotations

import re

import pytest

from herald.config import ProviderConfig
from herald.errors import ConfigurationError
from herald.models import Attachment, ChannelType, email, push, sms
from herald.providers import (
    PROVIDER_TYPES,
    ApnsProvider,
    FirebaseProvider,
    MailgunProvider,
    SendGridProvider,
    TwilioProvider,
    VonageProvider,
    create_provider,
)
from herald.providers.email import MAILGUN_MAX_MESSAGE_BYTES


def test_provider_types_cover_every_channel() -> None:
    channels = {provider_cls.channel for provider_cls in PROVIDER_TYPES.values()}
    assert channels == {ChannelType.EMAIL, ChannelType.SMS, ChannelType.PUSH}


def test_create_provider_normalizes_type_and_name() -> None:
    provider = create_provider(" Twilio ", ProviderConfig(account_id="a", auth_token="t"), name=" Backup ")
    assert isinstance(provider, TwilioProvider)
    assert provider.name == "backup"
    assert provider.channel is ChannelType.SMS


def test_create_provider_rejects_unknown_type() -> None:
    with pytest.raises(ConfigurationError, match="Unknown provider type 'pigeon'"):
        create_provider("pigeon")


@pytest.mark.parametrize(
    ("provider_cls", "configured", "missing"),
    [
        (SendGridProvider, ProviderConfig(api_key="key"), ProviderConfig(api_key="  ")),
        (
            MailgunProvider,
            ProviderConfig(api_key="key", properties={"domain": "mg.example.com"}),
            ProviderConfig(api_key="key"),
        ),
        (TwilioProvider, ProviderConfig(account_id="AC1", auth_token="t"), ProviderConfig(account_id="AC1")),
        (VonageProvider, ProviderConfig(api_key="k", api_secret="s"), ProviderConfig(api_key="k")),
        (
            FirebaseProvider,
            ProviderConfig(properties={"service_account_path": "/etc/fcm.json"}),
            ProviderConfig(),
        ),
        (
            ApnsProvider,
            ProviderConfig(properties={"team_id": "TEAM", "key_id": "KEY"}),
            ProviderConfig(properties={"team_id": "TEAM"}),
        ),
    ],
)
def test_is_configured(provider_cls, configured, missing) -> None:
    assert provider_cls(configured).is_configured()
    assert not provider_cls(missing).is_configured()


class TestMessageIds:
    """Simulated deliveries return vendor-shaped ids."""

    def test_twilio_sid(self) -> None:
        message_id = TwilioProvider().deliver(sms("+5491155551234", "hi"))
        assert re.fullmatch(r"SM[0-9a-f]{32}", message_id)

    def test_sendgrid_id(self) -> None:
        message_id = SendGridProvider().deliver(email("user@example.com", "Subject", "body"))
        assert len(message_id) == 22

    def test_mailgun_id_uses_domain(self) -> None:
        provider = MailgunProvider(ProviderConfig(api_key="k", properties={"domain": "mg.example.com"}))
        message_id = provider.deliver(email("user@example.com", "Subject", "body"))
        assert message_id.startswith("<")
        assert message_id.endswith("@mg.example.com>")

    def test_firebase_id_uses_project(self, firebase) -> None:
        message_id = firebase.deliver(push(["f" * 152], "hi"))
        assert message_id.startswith("projects/test-project/messages/")

    def test_firebase_default_project(self) -> None:
        assert FirebaseProvider().project_id == "demo-project"

    def test_apns_id_is_uppercase_uuid(self) -> None:
        message_id = ApnsProvider().deliver(push(["ab" * 32], "hi", topic="com.example.app"))
        assert message_id == message_id.upper()
        assert len(message_id) == 36

    def test_ids_are_unique(self) -> None:
        provider = VonageProvider()
        notification = sms("+5491155551234", "hi")
        assert len({provider.deliver(notification) for _ in range(50)}) == 50


class TestVendorRules:
    """validate_format only reports rules the vendor adds."""

    def test_sendgrid_recipient_cap(self) -> None:
        recipients = [f"user{index}@example.com" for index in range(999)]
        notification = email(recipients, "Subject", "body", cc=["a@example.com"], bcc=["b@example.com"])
        assert SendGridProvider().validate_format(notification) == [
            "too many recipients for sendgrid: 1001 (maximum 1000)"
        ]

    def test_mailgun_size_limit_counts_attachments(self) -> None:
        attachment = Attachment("big.bin", "application/octet-stream", b"\0" * MAILGUN_MAX_MESSAGE_BYTES)
        notification = email("user@example.com", "Subject", "body", attachments=[attachment])
        errors = MailgunProvider().validate_format(notification)
        assert len(errors) == 1
        assert errors[0].startswith("message exceeds the mailgun size limit")

    def test_twilio_sender_must_be_e164(self) -> None:
        provider = TwilioProvider()
        assert provider.validate_format(sms("+5491155551234", "hi", sender="+15005550006")) == []
        assert provider.validate_format(sms("+5491155551234", "hi", sender="12345")) == [
            "invalid sender phone number for twilio: 12345"
        ]

    def test_sms_truncate_overflow_property(self) -> None:
        assert not TwilioProvider().truncate_overflow
        assert TwilioProvider(ProviderConfig(properties={"truncate_overflow": True})).truncate_overflow

    def test_provider_repr(self) -> None:
        assert repr(TwilioProvider(name="Primary")) == "TwilioProvider(name='primary', channel=SMS)"


def test_twilio_sender_with_trailing_newline_is_rejected() -> None:
    errors = TwilioProvider().validate_format(sms("+5491155551234", "hi", sender="+15005550006\n"))
    assert errors == ["invalid sender phone number for twilio: +15005550006\n"]
