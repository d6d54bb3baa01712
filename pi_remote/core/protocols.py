"""Protocol definitions for the HTTP transport and callbacks."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol, runtime_checkable

from .errors import ValidationError
from .models import SystemSnapshot

SnapshotCallback = Callable[[SystemSnapshot], Awaitable[None] | None]
ErrorCallback = Callable[[Exception], Awaitable[None] | None]


@dataclass(slots=True, frozen=True)
class TransportResponse:
    status: int
    body: bytes = b""

    @property
    def ok(self) -> bool:
        return self.status == 200

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Decode the body as JSON.

        Raises:
            ValidationError: If the body is empty or not valid JSON.
        """
        if not self.body:
            raise ValidationError("Response body is empty")
        try:
            return json.loads(self.body)
        except ValueError as exc:  # JSONDecodeError, UnicodeDecodeError, int digit limit
            raise ValidationError(f"Response body is not valid JSON: {exc}") from exc


@runtime_checkable
class HttpTransport(Protocol):
    """Minimal contract for issuing requests against the home server."""

    async def request(
        self, method: str, path: str, *, timeout: Optional[float] = None
    ) -> TransportResponse:
        """Issue one request and return the raw response.

        Args:
            method: HTTP method, e.g. "GET".
            path: Path relative to the configured base URL.
            timeout: Per-request timeout in seconds (None = transport default).

        Raises:
            TransportError: If no HTTP response was received.
        """
        ...

    async def aclose(self) -> None:
        """Close any underlying resources."""
        ...
