"""Tests for the aiohttp transport against a local HTTP server."""

import asyncio

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web

from pi_remote.adapters import AiohttpTransport
from pi_remote.commands import CommandDispatcher
from pi_remote.config import ServerConfig
from pi_remote.core import SystemSnapshot, TransportError
from pi_remote.polling import MetricsPoller


@pytest_asyncio.fixture
async def pi_server(unused_tcp_port_factory):
    requests: list[tuple[str, str]] = []
    fail_next: list[bool] = [False]

    async def system_info_handler(request: web.Request):
        requests.append((request.method, request.path))
        return web.json_response(
            {"cpu_usage": 12.5, "memory_usage": 40, "disk_usage": 71.25}
        )

    async def action_handler(request: web.Request):
        requests.append((request.method, request.path))
        if fail_next[0]:
            fail_next[0] = False
            return web.Response(status=500, text="action failed")
        return web.json_response({"status": "ok"})

    async def slow_handler(request: web.Request):
        await asyncio.sleep(1.0)
        return web.json_response({})

    app = web.Application()
    app.router.add_get("/system_info", system_info_handler)
    app.router.add_post("/make_note", action_handler)
    app.router.add_post("/adjust_volume/{direction}", action_handler)
    app.router.add_get("/spotify_play", action_handler)
    app.router.add_get("/slow", slow_handler)

    runner = web.AppRunner(app)
    await runner.setup()

    port = unused_tcp_port_factory()
    site = web.TCPSite(runner, "127.0.0.1", port)
    await site.start()

    class _Server:
        def __init__(self, server_port: int):
            self._port = server_port

        def make_url(self, path: str = "/") -> str:
            if not path.startswith("/"):
                path = "/" + path
            return f"http://127.0.0.1:{self._port}{path}"

        @property
        def requests(self) -> list[tuple[str, str]]:
            return requests

        def set_fail_next(self) -> None:
            fail_next[0] = True

    try:
        yield _Server(port)
    finally:
        await runner.cleanup()


@pytest.mark.asyncio
async def test_request_returns_status_and_body(pi_server):
    transport = AiohttpTransport(ServerConfig(url=pi_server.make_url("/")))

    response = await transport.request("get", "system_info")
    await transport.aclose()

    assert response.status == 200
    assert response.json()["disk_usage"] == 71.25


@pytest.mark.asyncio
async def test_poll_once_against_server(pi_server):
    async with AiohttpTransport(ServerConfig(url=pi_server.make_url("/"))) as transport:
        snapshot = await MetricsPoller(transport).poll_once()

    assert snapshot == SystemSnapshot(12.5, 40.0, 71.25)
    assert pi_server.requests == [("GET", "/system_info")]


@pytest.mark.asyncio
async def test_dispatch_against_server(pi_server):
    async with AiohttpTransport(ServerConfig(url=pi_server.make_url("/"))) as transport:
        dispatcher = CommandDispatcher(transport)
        ok = await dispatcher.make_note()
        pi_server.set_fail_next()
        failed = await dispatcher.adjust_volume("down")
        ignored = await dispatcher.spotify_play()

    assert ok is not None and ok.succeeded
    assert failed is not None and not failed.succeeded and failed.status == 500
    assert ignored is None
    assert pi_server.requests == [
        ("POST", "/make_note"),
        ("POST", "/adjust_volume/down"),
        ("GET", "/spotify_play"),
    ]


@pytest.mark.asyncio
async def test_request_timeout_raises_transport_error(pi_server):
    transport = AiohttpTransport(ServerConfig(url=pi_server.make_url("/")))

    with pytest.raises(TransportError) as excinfo:
        await transport.request("GET", "/slow", timeout=0.05)
    await transport.aclose()

    assert excinfo.value.timeout is True


@pytest.mark.asyncio
async def test_connection_refused_raises_transport_error(unused_tcp_port):
    transport = AiohttpTransport(
        ServerConfig(url=f"http://127.0.0.1:{unused_tcp_port}")
    )

    with pytest.raises(TransportError):
        await transport.request("GET", "/system_info", timeout=1.0)
    await transport.aclose()


@pytest.mark.asyncio
async def test_injected_session_is_not_closed(pi_server):
    async with aiohttp.ClientSession() as session:
        transport = AiohttpTransport(
            ServerConfig(url=pi_server.make_url("/")), session=session
        )
        await transport.request("GET", "/system_info")
        await transport.aclose()

        assert not session.closed


def test_build_url_joins_paths():
    transport = AiohttpTransport(ServerConfig(url="http://pi.local:5000/"))

    assert transport.base_url == "http://pi.local:5000"
    assert transport.build_url("make_note") == "http://pi.local:5000/make_note"
    assert transport.build_url("/adjust_volume/up") == "http://pi.local:5000/adjust_volume/up"
