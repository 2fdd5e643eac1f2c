"""Value types describing what to send.

A :class:`Notification` carries the fields every channel understands plus an optional
per-channel payload (:class:`EmailOptions`, :class:`SmsOptions` or :class:`PushOptions`).
The payload type doubles as the discriminant: ``notification.kind`` is the channel the
payload was written for, or ``None`` for a channel-agnostic message that is routed by the
shape of its recipients.
"""

from __future__ import annotations

import dataclasses
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Union


class ChannelType(Enum):
    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"

    @classmethod
    def parse(cls, value: ChannelType | str) -> ChannelType:
        """Return the channel matching ``value`` (enum member or case-insensitive name)."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unknown channel '{value}' (expected one of: email, sms, push)")


class Priority(Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"

    @classmethod
    def parse(cls, value: Priority | str) -> Priority:
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unknown priority '{value}' (expected one of: low, normal, high, urgent)")


@dataclass(frozen=True)
class Attachment:
    filename: str
    content_type: str
    content: bytes
    content_id: str | None = None  # inline attachments

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class EmailOptions:
    sender: str | None = None
    html: str | None = None
    cc: tuple[str, ...] = ()
    bcc: tuple[str, ...] = ()
    reply_to: str | None = None
    attachments: tuple[Attachment, ...] = ()

    channel = ChannelType.EMAIL

    def __post_init__(self) -> None:
        object.__setattr__(self, "cc", _string_tuple(self.cc))
        object.__setattr__(self, "bcc", _string_tuple(self.bcc))
        object.__setattr__(self, "attachments", tuple(self.attachments or ()))


@dataclass(frozen=True)
class SmsOptions:
    sender: str | None = None  # originating phone number
    sender_id: str | None = None  # alphanumeric sender id, where the vendor supports it

    channel = ChannelType.SMS


@dataclass(frozen=True)
class PushOptions:
    badge: int | None = None
    sound: str | None = None
    ttl_seconds: int | None = None
    data: Mapping[str, str] = field(default_factory=dict)
    topic: str | None = None  # iOS bundle id / Android channel
    image_url: str | None = None

    channel = ChannelType.PUSH

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "data",
            MappingProxyType({str(key): str(value) for key, value in (self.data or {}).items()}),
        )

    @property
    def data_size(self) -> int:
        """Estimated payload size: the summed length of every key and value."""
        return sum(len(key) + len(value) for key, value in self.data.items())


ChannelOptions = Union[EmailOptions, SmsOptions, PushOptions]


def _string_tuple(values: Iterable[str] | str | None) -> tuple[str, ...]:
    if values is None:
        return ()
    if isinstance(values, str):
        values = [values]
    seen: dict[str, None] = {}
    for value in values:
        if value is None:
            continue
        text = str(value).strip()
        if text:
            seen.setdefault(text, None)
    return tuple(seen)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Notification:
    recipients: tuple[str, ...]
    content: str = ""
    subject: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    priority: Priority = Priority.NORMAL
    preferred_channel: ChannelType | None = None
    payload: ChannelOptions | None = None
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        object.__setattr__(self, "recipients", _string_tuple(self.recipients))
        object.__setattr__(self, "content", self.content or "")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata or {})))
        object.__setattr__(self, "priority", Priority.parse(self.priority))
        if self.preferred_channel is not None:
            object.__setattr__(self, "preferred_channel", ChannelType.parse(self.preferred_channel))
        if not self.id:
            object.__setattr__(self, "id", _new_id())

    @property
    def kind(self) -> ChannelType | None:
        return self.payload.channel if self.payload is not None else None

    @property
    def title(self) -> str | None:
        return self.subject

    @property
    def email(self) -> EmailOptions:
        return self.payload if isinstance(self.payload, EmailOptions) else EmailOptions()

    @property
    def sms(self) -> SmsOptions:
        return self.payload if isinstance(self.payload, SmsOptions) else SmsOptions()

    @property
    def push(self) -> PushOptions:
        return self.payload if isinstance(self.payload, PushOptions) else PushOptions()

    def with_content(self, content: str) -> Notification:
        """Return a copy with a different body; the id is preserved."""
        return dataclasses.replace(self, content=content)


def email(
    to: Iterable[str] | str,
    subject: str | None,
    content: str = "",
    *,
    sender: str | None = None,
    html: str | None = None,
    cc: Iterable[str] | str | None = None,
    bcc: Iterable[str] | str | None = None,
    reply_to: str | None = None,
    attachments: Iterable[Attachment] | None = None,
    metadata: Mapping[str, Any] | None = None,
    priority: Priority = Priority.NORMAL,
    id: str | None = None,
) -> Notification:
    options = EmailOptions(
        sender=sender,
        html=html,
        cc=cc or (),
        bcc=bcc or (),
        reply_to=reply_to,
        attachments=tuple(attachments or ()),
    )
    return Notification(
        recipients=_string_tuple(to),
        content=content,
        subject=subject,
        metadata=metadata or {},
        priority=priority,
        payload=options,
        id=id or _new_id(),
    )


def sms(
    to: Iterable[str] | str,
    content: str,
    *,
    sender: str | None = None,
    sender_id: str | None = None,
    metadata: Mapping[str, Any] | None = None,
    priority: Priority = Priority.NORMAL,
    id: str | None = None,
) -> Notification:
    return Notification(
        recipients=_string_tuple(to),
        content=content,
        metadata=metadata or {},
        priority=priority,
        payload=SmsOptions(sender=sender, sender_id=sender_id),
        id=id or _new_id(),
    )


def push(
    tokens: Iterable[str] | str,
    content: str = "",
    *,
    title: str | None = None,
    badge: int | None = None,
    sound: str | None = None,
    ttl_seconds: int | None = None,
    data: Mapping[str, str] | None = None,
    topic: str | None = None,
    image_url: str | None = None,
    metadata: Mapping[str, Any] | None = None,
    priority: Priority = Priority.NORMAL,
    id: str | None = None,
) -> Notification:
    options = PushOptions(
        badge=badge,
        sound=sound,
        ttl_seconds=ttl_seconds,
        data=data or {},
        topic=topic,
        image_url=image_url,
    )
    return Notification(
        recipients=_string_tuple(tokens),
        content=content,
        subject=title,
        metadata=metadata or {},
        priority=priority,
        payload=options,
        id=id or _new_id(),
    )
