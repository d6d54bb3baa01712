"""Periodic polling of the home server's system metrics.

Each call to :meth:`MetricsPoller.start` returns a :class:`PollHandle` that
owns one timer task, at most one in-flight request, and the last known-good
snapshot. The handle is the only teardown path: nothing is kept at module
level.

Overlap policy: when a tick fires while the previous request is still
outstanding, the tick is skipped. Snapshots are therefore applied in request
order and concurrency per handle is bounded to one request.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import math
from typing import Optional

from . import constants
from .core import (
    ErrorCallback,
    HttpTransport,
    PiRemoteError,
    ProtocolError,
    SnapshotCallback,
    SystemSnapshot,
    invoke_callback,
    send_request,
)

LOGGER = logging.getLogger(__name__)


class PollHandle:
    """Lifecycle of one polling schedule, owned by the caller."""

    def __init__(
        self,
        *,
        interval: float,
        on_update: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> None:
        self.interval = interval
        self._on_update = on_update
        self._on_error = on_error
        self._stopped = False
        self._latest: Optional[SystemSnapshot] = None
        self._timer_task: Optional[asyncio.Task[None]] = None
        self._inflight: Optional[asyncio.Task[None]] = None
        self.requests_issued = 0
        self.ticks_skipped = 0

    @property
    def stopped(self) -> bool:
        return self._stopped

    @property
    def latest(self) -> Optional[SystemSnapshot]:
        """Last snapshot that passed validation, if any."""
        return self._latest

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def _attach_timer(self, task: asyncio.Task[None]) -> None:
        self._timer_task = task

    def _track_request(self, task: asyncio.Task[None]) -> None:
        self.requests_issued += 1
        self._inflight = task

    def _publish(self, snapshot: SystemSnapshot) -> None:
        self._latest = snapshot

    def stop(self) -> None:
        """Cancel the timer and any in-flight request. Idempotent."""
        if self._stopped:
            return
        self._stopped = True

        for task in (self._timer_task, self._inflight):
            if task is not None and not task.done():
                task.cancel()

        LOGGER.debug(
            "Polling stopped after %d requests (%d ticks skipped)",
            self.requests_issued,
            self.ticks_skipped,
        )

    async def wait_closed(self) -> None:
        """Wait for the cancelled tasks to unwind after :meth:`stop`."""
        current = asyncio.current_task()
        for task in (self._timer_task, self._inflight):
            if task is None or task is current:
                continue
            with contextlib.suppress(asyncio.CancelledError):
                await task


class MetricsPoller:
    """Polls ``GET /system_info`` and publishes validated snapshots."""

    def __init__(
        self,
        transport: HttpTransport,
        *,
        path: str = constants.SYSTEM_INFO_PATH,
        request_timeout: Optional[float] = None,
    ) -> None:
        self._transport = transport
        self._path = path
        self._request_timeout = request_timeout

    async def poll_once(self) -> SystemSnapshot:
        """Fetch and validate one snapshot.

        Raises:
            TransportError: If no response arrived.
            ProtocolError: If the status was not 200.
            ValidationError: If the body was not a valid metrics object.
        """
        response = await send_request(
            self._transport, "GET", self._path, timeout=self._request_timeout
        )
        if not response.ok:
            raise ProtocolError(response.status, response.text().strip()[:200])
        return SystemSnapshot.from_payload(response.json())

    def start(
        self,
        interval: float,
        on_update: SnapshotCallback,
        on_error: ErrorCallback,
        *,
        initial_delay: Optional[float] = None,
    ) -> PollHandle:
        """Begin polling every ``interval`` seconds.

        Args:
            interval: Seconds between ticks; must be positive.
            on_update: Called with each new snapshot.
            on_error: Called with the classified error of each failed tick.
            initial_delay: Seconds before the first tick (default: one interval).

        Raises:
            ValueError: If ``interval`` is not a positive finite number.
            RuntimeError: If no event loop is running.
        """
        if not isinstance(interval, (int, float)) or not math.isfinite(interval):
            raise ValueError(f"Polling interval must be a finite number: {interval!r}")
        if interval <= 0:
            raise ValueError(f"Polling interval must be positive: {interval!r}")

        delay = interval if initial_delay is None else max(initial_delay, 0.0)

        handle = PollHandle(interval=interval, on_update=on_update, on_error=on_error)
        handle._attach_timer(
            asyncio.get_running_loop().create_task(self._run_timer(handle, delay))
        )
        LOGGER.info(
            "Polling %s every %.1fs (first tick in %.1fs)", self._path, interval, delay
        )
        return handle

    def stop(self, handle: PollHandle) -> None:
        handle.stop()

    async def _run_timer(self, handle: PollHandle, initial_delay: float) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + initial_delay

        while not handle.stopped:
            await asyncio.sleep(max(deadline - loop.time(), 0.0))
            if handle.stopped:
                break

            self._tick(handle)

            # Fixed schedule; ticks missed while the loop was stalled are dropped.
            deadline += handle.interval
            now = loop.time()
            if deadline < now:
                missed = math.ceil((now - deadline) / handle.interval)
                deadline += missed * handle.interval

    def _tick(self, handle: PollHandle) -> None:
        if handle.in_flight:
            handle.ticks_skipped += 1
            LOGGER.debug("Previous metrics request still in flight; skipping tick")
            return

        handle._track_request(asyncio.create_task(self._poll(handle)))

    async def _poll(self, handle: PollHandle) -> None:
        try:
            snapshot = await self.poll_once()
        except PiRemoteError as exc:
            if handle.stopped:
                return
            LOGGER.warning("Metrics poll failed: %s", exc)
            await invoke_callback(handle._on_error, exc)
            return

        if handle.stopped:
            return
        handle._publish(snapshot)
        LOGGER.debug("Metrics snapshot: %s", snapshot.as_dict())
        await invoke_callback(handle._on_update, snapshot)
