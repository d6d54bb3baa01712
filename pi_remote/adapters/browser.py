"""Open external share links with the platform's URL handler."""

from __future__ import annotations

import asyncio
import logging
import webbrowser
from dataclasses import dataclass
from typing import Callable, Mapping, Optional
from urllib.parse import urlparse

LOGGER = logging.getLogger(__name__)

BrowserOpen = Callable[[str], bool]


@dataclass(slots=True, frozen=True)
class LinkOutcome:
    succeeded: bool
    url: str
    message: str


class LinkOpener:
    """Delegates to :func:`webbrowser.open`; failures become outcomes."""

    def __init__(
        self,
        share_links: Optional[Mapping[str, str]] = None,
        *,
        opener: Optional[BrowserOpen] = None,
    ) -> None:
        self._share_links = {
            name.lower(): url for name, url in (share_links or {}).items()
        }
        self._opener: BrowserOpen = opener or webbrowser.open

    @property
    def share_links(self) -> dict[str, str]:
        return dict(self._share_links)

    def open(self, url: str) -> LinkOutcome:
        parsed = urlparse(url.strip()) if url else None
        if parsed is None or parsed.scheme not in {"http", "https"} or not parsed.netloc:
            LOGGER.warning("Refusing to open malformed URL %r", url)
            return LinkOutcome(False, url, f"An error occurred: invalid URL {url!r}")

        try:
            opened = self._opener(url)
        except webbrowser.Error as exc:
            LOGGER.warning("Failed to open %s: %s", url, exc)
            return LinkOutcome(False, url, f"An error occurred: {exc}")

        if not opened:
            LOGGER.warning("No handler available to open %s", url)
            return LinkOutcome(
                False, url, "An error occurred: no application can open this link"
            )

        LOGGER.info("Opened %s", url)
        return LinkOutcome(True, url, f"Opened {url}")

    def open_named(self, name: str) -> LinkOutcome:
        url = self._share_links.get(name.strip().lower())
        if url is None:
            return LinkOutcome(False, name, f"An error occurred: unknown link {name!r}")
        return self.open(url)

    async def open_async(self, url: str) -> LinkOutcome:
        """Run :meth:`open` in a worker thread; browser launch can block."""
        return await asyncio.to_thread(self.open, url)
