"""Exception taxonomy for notification dispatch.

Misuse-class errors (:class:`ValidationError`, :class:`ConfigurationError`) are raised to
the immediate caller. Delivery-class faults (:class:`ProviderError`) are converted into a
failure :class:`~herald.results.NotificationResult` by the dispatcher.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ChannelType


class NotificationError(Exception):
    """Base exception for everything raised by herald."""

    def __init__(
        self,
        message: str,
        *,
        channel: ChannelType | None = None,
        provider_name: str | None = None,
        error_code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.channel = channel
        self.provider_name = provider_name
        self.error_code = error_code


class ValidationError(NotificationError):
    """A notification violates one or more channel rules."""

    def __init__(
        self,
        errors: Iterable[str] | str,
        *,
        channel: ChannelType | None = None,
        provider_name: str | None = None,
    ) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors: list[str] = [str(item) for item in errors]
        super().__init__(
            "; ".join(self.errors) or "validation failed",
            channel=channel,
            provider_name=provider_name,
        )

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class ConfigurationError(NotificationError):
    """A channel or provider was requested that is not registered or not usable."""


class DispatcherClosedError(ConfigurationError):
    """Work was submitted after the dispatcher pool was shut down."""


class ProviderError(NotificationError):
    """A vendor rejected or failed a delivery attempt."""


SendError = ProviderError
