"""Core utility functions shared across modules."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

from .errors import PiRemoteError, TransportError
from .protocols import HttpTransport, TransportResponse

LOGGER = logging.getLogger(__name__)


async def send_request(
    transport: HttpTransport,
    method: str,
    path: str,
    *,
    timeout: Optional[float] = None,
) -> TransportResponse:
    """Issue one request, classifying any failure as a :class:`PiRemoteError`.

    Transports are expected to raise :class:`TransportError` themselves; any
    other exception escaping a transport is wrapped so callers only ever see
    the taxonomy.
    """
    try:
        return await transport.request(method, path, timeout=timeout)
    except asyncio.CancelledError:
        raise
    except PiRemoteError:
        raise
    except asyncio.TimeoutError as exc:
        raise TransportError(f"{method} {path} timed out", timeout=True) from exc
    except Exception as exc:
        raise TransportError(f"{method} {path} failed: {exc}") from exc


async def invoke_callback(callback: Callable[[Any], Any], payload: Any) -> None:
    """Call a sync or async observer; its failures are logged, never raised."""
    try:
        result = callback(payload)
        if inspect.isawaitable(result):
            await result
    except asyncio.CancelledError:
        raise
    except Exception:
        LOGGER.exception("Observer callback %r failed", callback)
