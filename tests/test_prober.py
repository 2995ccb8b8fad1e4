"""Tests for single-address probing."""

from __future__ import annotations

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from roomfinder.config import ScanSettings
from roomfinder.core import prober
from roomfinder.core.mock_hub import create_mock_hub_app
from roomfinder.errors import NetworkUnreachable


class FakeStages:
    """Replaces both probe stages with scripted outcomes per port."""

    def __init__(
        self,
        ping_ok: tuple[int, ...] = (),
        open_ok: tuple[int, ...] = (),
        hang: tuple[int, ...] = (),
    ) -> None:
        self.ping_ok = ping_ok
        self.open_ok = open_ok
        self.hang = hang
        self.calls: list[tuple[str, int]] = []

    async def http_ping(self, _session, address: str, port: int) -> int:
        self.calls.append(("ping", port))
        if port in self.hang:
            await asyncio.sleep(10)
        if port in self.ping_ok:
            return 200
        raise NetworkUnreachable(f"{address}:{port} refused")

    async def port_open(self, address: str, port: int) -> None:
        self.calls.append(("open", port))
        if port in self.hang:
            await asyncio.sleep(10)
        if port in self.open_ok:
            return
        raise NetworkUnreachable(f"{address}:{port} refused")

    def install(self, monkeypatch: pytest.MonkeyPatch) -> FakeStages:
        monkeypatch.setattr(prober, "http_ping", self.http_ping)
        monkeypatch.setattr(prober, "port_open", self.port_open)
        return self


def test_all_stages_fail_returns_none(monkeypatch):
    stages = FakeStages().install(monkeypatch)

    device = asyncio.run(prober.probe_address("10.0.0.5", [80, 3000], 100))

    assert device is None
    assert stages.calls == [("ping", 80), ("open", 80), ("ping", 3000), ("open", 3000)]


def test_all_stages_time_out_returns_none(monkeypatch):
    FakeStages(hang=(80, 8080)).install(monkeypatch)

    device = asyncio.run(prober.probe_address("10.0.0.5", [80, 8080], 20))

    assert device is None


def test_ping_on_second_port_after_timeout(monkeypatch):
    stages = FakeStages(ping_ok=(80,), hang=(8080,)).install(monkeypatch)

    device = asyncio.run(prober.probe_address("10.0.0.5", [8080, 80], 20))

    assert device is not None
    assert device.discovery_method == "http-ping"
    assert device.display_name == "SmartRoomHub"
    assert device.port == 80
    assert device.status == "online"
    assert ("open", 80) not in stages.calls
    assert stages.calls == [("ping", 8080), ("open", 8080), ("ping", 80)]


def test_port_open_fallback(monkeypatch):
    FakeStages(open_ok=(3000,)).install(monkeypatch)

    device = asyncio.run(prober.probe_address("10.0.0.9", [80, 3000], 100))

    assert device is not None
    assert device.discovery_method == "port-open"
    assert device.display_name == "SmartRoomHub (Port Open)"
    assert device.port == 3000
    assert device.round_trip_ms is not None
    assert device.round_trip_ms >= 0


def test_manual_probe_overrides_tag(monkeypatch):
    FakeStages(open_ok=(80,)).install(monkeypatch)
    settings = ScanSettings(ports=[80], timeout_ms=500)

    device = asyncio.run(prober.probe_manual(" 10.0.0.9 ", settings))

    assert device is not None
    assert device.address == "10.0.0.9"
    assert device.discovery_method == "manual"


def test_manual_probe_not_found(monkeypatch):
    FakeStages().install(monkeypatch)
    settings = ScanSettings(ports=[80], timeout_ms=500)

    assert asyncio.run(prober.probe_manual("10.0.0.9", settings)) is None


def test_manual_probe_rejects_bad_address():
    with pytest.raises(ValueError, match="Invalid IPv4 address"):
        asyncio.run(prober.probe_manual("fe80::1", ScanSettings()))


def test_connectivity_test_success(monkeypatch):
    stages = FakeStages(ping_ok=(80,)).install(monkeypatch)

    result = asyncio.run(prober.connectivity_test("10.0.0.9"))

    assert result.reachable is True
    assert result.method == "HTTP Ping"
    assert result.explanation is None
    assert stages.calls == [("ping", 80)]


def test_connectivity_test_has_no_fallback(monkeypatch):
    stages = FakeStages(open_ok=(80,)).install(monkeypatch)

    result = asyncio.run(prober.connectivity_test("10.0.0.9"))

    assert result.reachable is False
    assert "did not respond" in (result.explanation or "")
    assert stages.calls == [("ping", 80)]


def test_connectivity_test_timeout(monkeypatch):
    FakeStages(hang=(8080,)).install(monkeypatch)

    result = asyncio.run(prober.connectivity_test("10.0.0.9", 8080, timeout_ms=20))

    assert result.reachable is False


# Loopback tests exercising the real stages


async def _raw_server(handler) -> tuple[asyncio.AbstractServer, int]:
    server = await asyncio.start_server(handler, "127.0.0.1", 0)
    return server, server.sockets[0].getsockname()[1]


async def _refuse_ping(reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
    """Answer anything except the ping request, which is dropped unanswered."""
    request = await reader.readuntil(b"\r\n\r\n")
    if b"/ping" not in request.split(b"\r\n", 1)[0]:
        writer.write(b"\x00\x01")
        await writer.drain()
    writer.close()


def test_http_ping_against_mock_hub():
    async def _run() -> int:
        async with TestServer(create_mock_hub_app("hub-1")) as server:
            async with prober.create_probe_session() as session:
                return await prober.http_ping(session, "127.0.0.1", server.port)

    assert asyncio.run(_run()) == 200


def test_http_ping_refused(closed_port):
    async def _run() -> None:
        async with prober.create_probe_session() as session:
            await prober.http_ping(session, "127.0.0.1", closed_port)

    with pytest.raises(NetworkUnreachable):
        asyncio.run(_run())


def test_any_http_status_counts_as_present():
    async def _run():
        async with TestServer(web.Application()) as server:
            return await prober.probe_address("127.0.0.1", [server.port], 1000)

    device = asyncio.run(_run())
    assert device is not None
    assert device.discovery_method == "http-ping"


def test_probe_skips_closed_port_then_finds_hub(closed_port):
    async def _run():
        async with TestServer(create_mock_hub_app()) as server:
            device = await prober.probe_address(
                "127.0.0.1", [closed_port, server.port], 1000
            )
            return device, server.port

    device, hub_port = asyncio.run(_run())
    assert device is not None
    assert device.port == hub_port
    assert device.discovery_method == "http-ping"


def test_port_open_receives_data():
    async def _run():
        server, port = await _raw_server(_refuse_ping)
        async with server:
            await prober.port_open("127.0.0.1", port)
            return await prober.probe_address("127.0.0.1", [port], 1000)

    device = asyncio.run(_run())
    assert device is not None
    assert device.discovery_method == "port-open"


def test_port_open_without_data():
    async def _close_silently(
        reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        await reader.readuntil(b"\r\n\r\n")
        writer.close()

    async def _run() -> None:
        server, port = await _raw_server(_close_silently)
        async with server:
            await prober.port_open("127.0.0.1", port)

    with pytest.raises(NetworkUnreachable, match="without sending data"):
        asyncio.run(_run())


def test_port_open_refused(closed_port):
    with pytest.raises(NetworkUnreachable):
        asyncio.run(prober.port_open("127.0.0.1", closed_port))


def test_probe_closed_port_returns_none(closed_port):
    assert asyncio.run(prober.probe_address("127.0.0.1", [closed_port], 500)) is None
