from __future__ import annotations

import dataclasses

import pytest

from herald.models import (
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


def test_channel_type_parse_accepts_names_and_members() -> None:
    assert ChannelType.parse("EMAIL") is ChannelType.EMAIL
    assert ChannelType.parse(" sms ") is ChannelType.SMS
    assert ChannelType.parse(ChannelType.PUSH) is ChannelType.PUSH


def test_channel_type_parse_rejects_unknown_channel() -> None:
    with pytest.raises(ValueError, match="Unknown channel"):
        ChannelType.parse("fax")


def test_notification_normalizes_recipients() -> None:
    notification = Notification(recipients=[" a@example.com ", "", "a@example.com", "b@example.com"], content="hi")
    assert notification.recipients == ("a@example.com", "b@example.com")


def test_notification_accepts_single_recipient_string() -> None:
    notification = Notification(recipients="+5491155551234", content="hi")
    assert notification.recipients == ("+5491155551234",)


def test_notification_is_immutable() -> None:
    notification = Notification(recipients=("a@example.com",), content="hi")
    with pytest.raises(dataclasses.FrozenInstanceError):
        notification.content = "changed"  # type: ignore[misc]


def test_notification_metadata_is_read_only_copy() -> None:
    source = {"campaign": "welcome"}
    notification = Notification(recipients=("a@example.com",), content="hi", metadata=source)
    source["campaign"] = "changed"

    assert notification.metadata["campaign"] == "welcome"
    with pytest.raises(TypeError):
        notification.metadata["campaign"] = "other"  # type: ignore[index]


def test_notification_generates_unique_ids() -> None:
    first = Notification(recipients=("a@example.com",), content="hi")
    second = Notification(recipients=("a@example.com",), content="hi")
    assert first.id and second.id
    assert first.id != second.id


def test_notification_coerces_preferred_channel_and_priority() -> None:
    notification = Notification(
        recipients=("a@example.com",),
        content="hi",
        preferred_channel="push",  # type: ignore[arg-type]
        priority="urgent",  # type: ignore[arg-type]
    )
    assert notification.preferred_channel is ChannelType.PUSH
    assert notification.priority is Priority.URGENT


def test_channel_agnostic_notification_has_no_kind() -> None:
    notification = Notification(recipients=("a@example.com",), content="hi")
    assert notification.kind is None
    assert notification.email == EmailOptions()
    assert notification.sms == SmsOptions()


def test_email_factory_builds_email_variant() -> None:
    notification = email(
        "user@example.com",
        "Welcome",
        "Hello there",
        sender="noreply@example.com",
        cc=["boss@example.com", "boss@example.com"],
        attachments=[Attachment("report.pdf", "application/pdf", b"%PDF")],
        id="email-1",
    )
    assert notification.kind is ChannelType.EMAIL
    assert notification.id == "email-1"
    assert notification.subject == "Welcome"
    assert notification.email.sender == "noreply@example.com"
    assert notification.email.cc == ("boss@example.com",)
    assert notification.email.attachments[0].size == 4


def test_sms_factory_builds_sms_variant() -> None:
    notification = sms("+5491155551234", "Tu codigo es: 123456", sender_id="ACME")
    assert notification.kind is ChannelType.SMS
    assert notification.sms.sender_id == "ACME"
    assert notification.content == "Tu codigo es: 123456"


def test_push_factory_uses_subject_as_title() -> None:
    notification = push(["token-1"], title="Sale", badge=3, data={"order": 42})  # type: ignore[dict-item]
    assert notification.kind is ChannelType.PUSH
    assert notification.title == "Sale"
    assert notification.content == ""
    assert notification.push.badge == 3
    assert notification.push.data["order"] == "42"


def test_push_options_data_size_sums_keys_and_values() -> None:
    options = PushOptions(data={"ab": "cde", "f": ""})
    assert options.data_size == 6


def test_with_content_returns_copy_with_same_id() -> None:
    original = sms("+5491155551234", "long message")
    copy = original.with_content("short")
    assert copy.id == original.id
    assert copy.content == "short"
    assert original.content == "long message"
    assert copy.payload == original.payload


def test_priority_parse_is_case_insensitive() -> None:
    assert Priority.parse("HIGH") is Priority.HIGH
    assert Priority.parse(" Low ") is Priority.LOW
    assert Notification(recipients=("a@example.com",), content="hi", priority="URGENT").priority is Priority.URGENT  # type: ignore[arg-type]
    with pytest.raises(ValueError, match="Unknown priority"):
        Priority.parse("critical")
