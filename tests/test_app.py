"""Tests for RemoteControlApp wiring."""

from configparser import ConfigParser
from pathlib import Path

import pytest

from pi_remote.adapters import LinkOpener
from pi_remote.app import RemoteControlApp
from pi_remote.config import (
    LinksConfig,
    LoggingConfig,
    PollingConfig,
    RemoteConfig,
    ServerConfig,
)
from pi_remote.core import SystemSnapshot, ValidationError


def _build_config(*, interval: float = 0.01) -> RemoteConfig:
    return RemoteConfig(
        server=ServerConfig(url="http://pi.test:5000", request_timeout_seconds=1.0),
        polling=PollingConfig(interval_seconds=interval, initial_delay_seconds=0.0),
        links=LinksConfig(),
        logging=LoggingConfig(),
        raw=ConfigParser(),
        path=Path("pi-remote.cfg"),
    )


@pytest.mark.asyncio
async def test_watch_reports_until_count(fake_transport, metrics_payload):
    fake_transport.queue_json(metrics_payload)
    fake_transport.queue_json({"cpu_usage": "n/a", "memory_usage": 1, "disk_usage": 1})
    updates: list[SystemSnapshot] = []
    errors: list[Exception] = []

    async with RemoteControlApp(_build_config(), transport=fake_transport) as app:
        handle = await app.watch(updates.append, errors.append, count=2)

        assert handle.stopped
        assert app.latest_snapshot == SystemSnapshot(42.0, 17.0, 88.0)

    assert updates == [SystemSnapshot(42.0, 17.0, 88.0)]
    assert isinstance(errors[0], ValidationError)
    assert fake_transport.closed


@pytest.mark.asyncio
async def test_dispatcher_shares_transport(fake_transport):
    async with RemoteControlApp(_build_config(), transport=fake_transport) as app:
        outcome = await app.dispatcher.fetch_camera()

    assert outcome is not None and outcome.succeeded
    assert fake_transport.calls == [("POST", "/fetch_camera")]


@pytest.mark.asyncio
async def test_open_link_by_name_or_url(fake_transport):
    opened: list[str] = []

    def browser(url: str) -> bool:
        opened.append(url)
        return True

    links = LinkOpener({"dropbox": "https://www.dropbox.com"}, opener=browser)
    async with RemoteControlApp(
        _build_config(), transport=fake_transport, link_opener=links
    ) as app:
        named = await app.open_link("Dropbox")
        literal = await app.open_link("https://github.com")

    assert named.succeeded and literal.succeeded
    assert opened == ["https://www.dropbox.com", "https://github.com"]
