import asyncio
import json
from collections import deque
from typing import Any, Optional, Union

import pytest

from pi_remote.core import TransportResponse

Scripted = Union[TransportResponse, BaseException]


class FakeTransport:
    """In-memory transport returning scripted responses in order."""

    def __init__(self, *, delay: float = 0.0) -> None:
        self.delay = delay
        self.default: Scripted = TransportResponse(200, b"{}")
        self.calls: list[tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False
        self._responses: deque[Scripted] = deque()

    def queue(self, item: Scripted) -> None:
        self._responses.append(item)

    def queue_json(self, payload: Any, status: int = 200) -> None:
        self.queue(TransportResponse(status, json.dumps(payload).encode("utf-8")))

    def queue_status(self, status: int, body: bytes = b"") -> None:
        self.queue(TransportResponse(status, body))

    def respond_always_json(self, payload: Any, status: int = 200) -> None:
        self.default = TransportResponse(status, json.dumps(payload).encode("utf-8"))

    async def request(
        self, method: str, path: str, *, timeout: Optional[float] = None
    ) -> TransportResponse:
        self.calls.append((method, path))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            item = self._responses.popleft() if self._responses else self.default
            if self.delay:
                await asyncio.sleep(self.delay)
            if isinstance(item, BaseException):
                raise item
            return item
        finally:
            self.in_flight -= 1

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def metrics_payload() -> dict[str, Any]:
    return {"cpu_usage": 42, "memory_usage": 17, "disk_usage": 88}


@pytest.fixture
def transport_factory():
    return FakeTransport
