"""Facade that routes notifications to a channel and delivers them.

Channel selection, validation and the credential check always run on the caller's
thread, so misuse errors surface immediately from :meth:`Dispatcher.send` and
:meth:`Dispatcher.send_async`. Only the provider call itself is handed to the worker
pool. A provider call that hangs occupies its worker until it returns; there is no
per-send timeout or cancellation.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import TYPE_CHECKING

from .channels import Channel
from .config import DEFAULT_POOL_SIZE, build_registry
from .errors import ConfigurationError, DispatcherClosedError, NotificationError, ValidationError
from .logging_utils import notification_fields, render_errors_block, render_fields_block, result_fields
from .models import Notification
from .registry import ProviderRegistry
from .results import NotificationResult

if TYPE_CHECKING:
    from .config import DispatcherSettings

LOGGER = logging.getLogger(__name__)

NO_COMPATIBLE_CHANNEL = "no compatible channel found for recipients"


class Dispatcher:
    """Send notifications through the providers held by a :class:`ProviderRegistry`."""

    def __init__(
        self,
        registry: ProviderRegistry,
        *,
        pool_size: int = DEFAULT_POOL_SIZE,
        executor: Executor | None = None,
    ) -> None:
        if pool_size < 1:
            raise ValueError("pool_size must be greater than or equal to 1")
        self._registry = registry
        self._pool_size = pool_size
        self._executor = executor
        self._owns_executor = executor is None
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def from_settings(cls, settings: DispatcherSettings) -> Dispatcher:
        return cls(build_registry(settings), pool_size=settings.pool_size)

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> Dispatcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # Channel selection ---------------------------------------------------------------

    def resolve(self, notification: Notification, provider: str | None = None) -> Channel:
        """Pick the channel that will carry ``notification``.

        An explicit provider name is resolved directly and never falls back. Otherwise the
        preferred channel is used when it supports the notification, then every registered
        channel is tried in registration order.
        """
        if provider:
            return self._resolve_named(notification, provider)

        preferred = notification.preferred_channel
        if preferred is not None:
            channel = self._registry.get_channel(preferred)
            if channel is not None and channel.supports(notification):
                return channel
            LOGGER.debug(
                "Preferred channel %s cannot carry notification %s; scanning all channels",
                preferred.name,
                notification.id,
            )

        for channel_type in self._registry.channels():
            channel = self._registry.get_channel(channel_type)
            if channel is not None and channel.supports(notification):
                return channel

        LOGGER.info(render_errors_block("No Compatible Channel", notification_fields(notification), [NO_COMPATIBLE_CHANNEL]))
        raise ValidationError(NO_COMPATIBLE_CHANNEL)

    def _resolve_named(self, notification: Notification, provider: str) -> Channel:
        channel_type = notification.kind or notification.preferred_channel
        if channel_type is None:
            found = self._registry.find_provider(provider)
            channel_type = found.channel if found is not None else None

        channel = self._registry.get_channel(channel_type, provider) if channel_type is not None else None
        if channel is None:
            label = channel_type.name if channel_type is not None else "any channel"
            raise ConfigurationError(
                f"Provider '{provider}' not found for channel {label}",
                channel=channel_type,
                provider_name=provider,
            )
        return channel

    # Sending -------------------------------------------------------------------------

    def send(self, notification: Notification, provider: str | None = None) -> NotificationResult:
        """Validate and deliver on the calling thread.

        Raises :class:`ValidationError` or :class:`ConfigurationError` for caller misuse.
        Delivery faults are returned as a failed :class:`NotificationResult`.
        """
        channel = self._prepare(notification, provider)
        return self._deliver(channel, notification)

    def send_async(self, notification: Notification, provider: str | None = None) -> Future[NotificationResult]:
        """Validate now, deliver on the worker pool.

        Misuse errors are raised here, before anything is scheduled; the returned future
        always resolves to a :class:`NotificationResult`.
        """
        self._ensure_open()
        channel = self._prepare(notification, provider)
        return self._submit(self._deliver, channel, notification)

    def send_batch(
        self,
        notifications: Iterable[Notification],
        provider: str | None = None,
    ) -> list[NotificationResult]:
        """Send every notification on the pool and return results in input order.

        A notification that fails selection, validation or delivery yields a failed
        result at its index; the remaining items are unaffected.
        """
        self._ensure_open()
        items = list(notifications)
        futures = [self._submit(self._send_isolated, notification, provider) for notification in items]
        results = [future.result() for future in futures]

        failed = sum(1 for result in results if result.is_failure)
        LOGGER.info("Batch of %d notification(s) finished: %d sent, %d failed", len(results), len(results) - failed, failed)
        return results

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting async and batch work and release the worker pool."""
        with self._lock:
            if self._closed:
                LOGGER.debug("Dispatcher already shut down")
                return
            self._closed = True
            executor = self._executor
        if executor is not None and self._owns_executor:
            executor.shutdown(wait=wait)
        LOGGER.debug("Dispatcher shut down")

    # Internals -----------------------------------------------------------------------

    def _prepare(self, notification: Notification, provider: str | None) -> Channel:
        channel = self.resolve(notification, provider)
        LOGGER.debug(
            render_fields_block(
                "Channel Selected",
                {**notification_fields(notification), "Channel": channel.type, "Provider": channel.provider_name},
            )
        )
        try:
            channel.check(notification)
        except ValidationError as exc:
            LOGGER.info(
                render_errors_block(
                    "Notification Rejected",
                    {**notification_fields(notification), "Channel": channel.type, "Provider": channel.provider_name},
                    exc.errors,
                )
            )
            raise

        if not channel.provider.is_configured():
            raise ConfigurationError(
                f"Provider '{channel.provider_name}' for channel {channel.type.name} is missing credentials",
                channel=channel.type,
                provider_name=channel.provider_name,
            )
        return channel

    def _deliver(self, channel: Channel, notification: Notification) -> NotificationResult:
        try:
            result = channel.deliver(notification)
        except Exception as exc:
            result = NotificationResult.from_exception(
                channel.type,
                channel.provider_name,
                exc,
                notification_id=notification.id,
            )
            LOGGER.warning(render_fields_block("Delivery Failed", result_fields(result)))
            return result

        LOGGER.info(
            "Notification %s sent via %s/%s [message_id=%s]",
            notification.id,
            channel.type.name,
            channel.provider_name,
            result.message_id,
        )
        return result

    def _send_isolated(self, notification: Notification, provider: str | None) -> NotificationResult:
        try:
            return self.send(notification, provider)
        except NotificationError as exc:
            return NotificationResult.from_exception(
                exc.channel,
                exc.provider_name,
                exc,
                notification_id=notification.id,
            )
        except Exception as exc:  # pragma: no cover
            LOGGER.exception("Unexpected error while sending notification %s", notification.id)
            return NotificationResult.from_exception(None, None, exc, notification_id=notification.id)

    def _ensure_open(self) -> None:
        if self._closed:
            raise DispatcherClosedError("Dispatcher has been shut down; no further work is accepted")

    def _get_executor(self) -> Executor:
        with self._lock:
            if self._closed:
                raise DispatcherClosedError("Dispatcher has been shut down; no further work is accepted")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self._pool_size, thread_name_prefix="herald")
            return self._executor

    def _submit(self, fn, *args) -> Future[NotificationResult]:
        executor = self._get_executor()
        try:
            return executor.submit(fn, *args)
        except RuntimeError as exc:
            raise DispatcherClosedError(f"Worker pool rejected the task: {exc}") from exc
