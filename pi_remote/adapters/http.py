"""aiohttp-backed transport for the home server's HTTP control API."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp

from ..config import ServerConfig
from ..core import HttpTransport, TransportError, TransportResponse

LOGGER = logging.getLogger(__name__)


class AiohttpTransport(HttpTransport):
    """Non-blocking HTTP client bound to one base URL."""

    def __init__(
        self,
        config: ServerConfig,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self.config = config
        self.default_timeout = config.request_timeout_seconds

        self._base_url = self.config.url.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None

    @property
    def base_url(self) -> str:
        return self._base_url

    def build_url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        return f"{self._base_url}{path}"

    async def request(
        self, method: str, path: str, *, timeout: Optional[float] = None
    ) -> TransportResponse:
        """Issue a single request; no retries.

        Raises:
            TransportError: On timeout or any client-side connection failure.
        """

        session = await self._ensure_session()
        url = self.build_url(path)
        limit = timeout if timeout is not None else self.default_timeout

        try:
            async with asyncio.timeout(limit):
                async with session.request(method.upper(), url) as response:
                    body = await response.read()
                    return TransportResponse(status=response.status, body=body)
        except asyncio.TimeoutError as exc:
            LOGGER.warning(
                "%s %s timed out after %.1fs", method.upper(), url, limit
            )
            raise TransportError(
                f"Request to {url} timed out after {limit:.1f}s", timeout=True
            ) from exc
        except aiohttp.ClientError as exc:
            LOGGER.debug("%s %s failed: %s", method.upper(), url, exc)
            raise TransportError(f"Request to {url} failed: {exc}") from exc

    async def aclose(self) -> None:
        if self._owns_session and self._session is not None:
            await self._session.close()
        self._session = None

    async def __aenter__(self) -> "AiohttpTransport":
        await self._ensure_session()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=None)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session
