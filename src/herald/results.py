"""Uniform outcome record returned for every send attempt."""

from __future__ import annotations

import datetime as dt
import threading
from dataclasses import dataclass, field
from typing import Any

from .models import ChannelType


class _MonotonicClock:
    """UTC wall clock that never goes backwards within the process."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last: dt.datetime | None = None

    def now(self) -> dt.datetime:
        current = dt.datetime.now(dt.timezone.utc)
        with self._lock:
            if self._last is not None and current < self._last:
                current = self._last
            self._last = current
        return current


_CLOCK = _MonotonicClock()


def _timestamp() -> dt.datetime:
    return _CLOCK.now()


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    channel: ChannelType | None
    provider_name: str | None
    message_id: str | None = None
    error_message: str | None = None
    error_code: str | None = None
    notification_id: str | None = None
    timestamp: dt.datetime = field(default_factory=_timestamp)

    def __post_init__(self) -> None:
        if self.success:
            if not self.message_id:
                raise ValueError("A successful result requires a message_id")
            if self.error_message is not None or self.error_code is not None:
                raise ValueError("A successful result cannot carry error details")
        else:
            if self.message_id is not None:
                raise ValueError("A failed result cannot carry a message_id")
            if not self.error_message:
                raise ValueError("A failed result requires an error_message")

    @classmethod
    def succeeded(
        cls,
        channel: ChannelType,
        provider_name: str,
        message_id: str,
        *,
        notification_id: str | None = None,
    ) -> NotificationResult:
        return cls(
            success=True,
            channel=channel,
            provider_name=provider_name,
            message_id=message_id,
            notification_id=notification_id,
        )

    @classmethod
    def failure(
        cls,
        channel: ChannelType | None,
        provider_name: str | None,
        error_message: str,
        error_code: str | None = None,
        *,
        notification_id: str | None = None,
    ) -> NotificationResult:
        return cls(
            success=False,
            channel=channel,
            provider_name=provider_name,
            error_message=error_message or "unknown error",
            error_code=error_code,
            notification_id=notification_id,
        )

    @classmethod
    def from_exception(
        cls,
        channel: ChannelType | None,
        provider_name: str | None,
        exc: BaseException,
        *,
        notification_id: str | None = None,
    ) -> NotificationResult:
        """Build a failure whose error code is the vendor code, or else the exception's kind."""
        code = getattr(exc, "error_code", None) or type(exc).__name__
        return cls.failure(
            channel,
            provider_name,
            str(exc) or type(exc).__name__,
            code,
            notification_id=notification_id,
        )

    @property
    def is_failure(self) -> bool:
        return not self.success

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "channel": self.channel.value if self.channel else None,
            "provider": self.provider_name,
            "message_id": self.message_id,
            "error_message": self.error_message,
            "error_code": self.error_code,
            "notification_id": self.notification_id,
            "timestamp": self.timestamp.isoformat(),
        }
