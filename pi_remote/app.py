"""Application wiring for pi-remote."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .adapters import AiohttpTransport, LinkOpener, LinkOutcome
from .commands import CommandDispatcher
from .config import RemoteConfig, load_config
from .core import (
    ErrorCallback,
    HttpTransport,
    SnapshotCallback,
    SystemSnapshot,
    invoke_callback,
)
from .polling import MetricsPoller, PollHandle

LOGGER = logging.getLogger(__name__)


class RemoteControlApp:
    """Owns the transport and exposes polling, dispatch and link opening.

    The transport can be injected for testing; by default an
    :class:`AiohttpTransport` bound to the configured server is created.
    """

    def __init__(
        self,
        config: Optional[RemoteConfig] = None,
        *,
        transport: Optional[HttpTransport] = None,
        link_opener: Optional[LinkOpener] = None,
    ) -> None:
        self._config = config or load_config()
        self._transport: HttpTransport = transport or AiohttpTransport(
            self._config.server
        )
        timeout = self._config.server.request_timeout_seconds
        self.poller = MetricsPoller(self._transport, request_timeout=timeout)
        self.dispatcher = CommandDispatcher(self._transport, request_timeout=timeout)
        self.links = link_opener or LinkOpener(self._config.links.share_links)
        self._shutdown_event: Optional[asyncio.Event] = None
        self._handle: Optional[PollHandle] = None

    @property
    def config(self) -> RemoteConfig:
        return self._config

    @property
    def latest_snapshot(self) -> Optional[SystemSnapshot]:
        if self._handle is None:
            return None
        return self._handle.latest

    async def watch(
        self,
        on_update: SnapshotCallback,
        on_error: ErrorCallback,
        *,
        interval: Optional[float] = None,
        count: Optional[int] = None,
    ) -> PollHandle:
        """Poll until :meth:`request_shutdown` or ``count`` ticks reported.

        Every reported tick, successful or failed, counts towards ``count``.
        """
        polling = self._config.polling
        period = interval if interval is not None else polling.interval_seconds
        shutdown = self._shutdown_event = asyncio.Event()
        reported = 0

        def _count() -> None:
            nonlocal reported
            reported += 1
            if count is not None and reported >= count:
                shutdown.set()

        async def _on_update(snapshot: SystemSnapshot) -> None:
            await invoke_callback(on_update, snapshot)
            _count()

        async def _on_error(error: Exception) -> None:
            await invoke_callback(on_error, error)
            _count()

        handle = self._handle = self.poller.start(
            period,
            _on_update,
            _on_error,
            initial_delay=polling.initial_delay_seconds,
        )
        try:
            await shutdown.wait()
        finally:
            self.poller.stop(handle)
            await handle.wait_closed()
        return handle

    def request_shutdown(self) -> None:
        if self._shutdown_event is not None:
            self._shutdown_event.set()

    async def open_link(self, target: str) -> LinkOutcome:
        """Open a configured share link by name, or a literal URL."""
        if target.strip().lower() in self.links.share_links:
            return await asyncio.to_thread(self.links.open_named, target)
        return await self.links.open_async(target)

    async def aclose(self) -> None:
        self.request_shutdown()
        if self._handle is not None:
            self._handle.stop()
            await self._handle.wait_closed()
        await self._transport.aclose()

    async def __aenter__(self) -> "RemoteControlApp":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
