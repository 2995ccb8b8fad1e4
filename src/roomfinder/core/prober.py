"""Single-address probing for SmartRoomHub devices.

Each candidate port is tried in order with two stages:

1. HTTP ping: ``GET /ping``. Any HTTP response counts, whatever the status,
   because hubs differ in what the endpoint returns.
2. Port check: open a TCP connection, request ``/favicon.ico`` and accept any
   byte back. This only proves something is listening, so the device is
   labelled accordingly.

Both stages share the same per-attempt deadline. Timeouts and connection
failures are not errors here; they move on to the next stage or port.
"""

from __future__ import annotations

import asyncio
import contextlib
import ipaddress
import logging
import time
from collections.abc import Sequence

import aiohttp

from roomfinder.config import ScanSettings
from roomfinder.errors import NetworkUnreachable, ProbeTimeout
from roomfinder.models import ConnectivityResult, Device, DiscoveryMethod

from .http import create_probe_session
from .timeouts import with_timeout

logger = logging.getLogger(__name__)

PING_PATH = "/ping"
FALLBACK_PATH = "/favicon.ico"
HUB_NAME = "SmartRoomHub"
PORT_OPEN_NAME = f"{HUB_NAME} (Port Open)"
CONNECTIVITY_TIMEOUT_MS = 3000
DEFAULT_HTTP_PORT = 80
NO_RESPONSE_EXPLANATION = (
    "Device did not respond to the ping request. "
    "It might be offline or on a different network."
)


async def http_ping(session: aiohttp.ClientSession, address: str, port: int) -> int:
    """Send the ping request and return the HTTP status of whatever answered."""
    url = f"http://{address}:{port}{PING_PATH}"
    try:
        async with session.get(url, allow_redirects=False) as response:
            return response.status
    except (aiohttp.ClientError, OSError) as exc:
        raise NetworkUnreachable(f"{url}: {exc}") from exc


async def port_open(address: str, port: int) -> None:
    """Succeed if ``address:port`` accepts a connection and sends any data back."""
    try:
        reader, writer = await asyncio.open_connection(address, port)
    except OSError as exc:
        raise NetworkUnreachable(f"{address}:{port}: {exc}") from exc

    request = (
        f"GET {FALLBACK_PATH}?t={int(time.time() * 1000)} HTTP/1.0\r\n"
        f"Host: {address}:{port}\r\n"
        "Connection: close\r\n"
        "\r\n"
    )
    try:
        writer.write(request.encode("ascii"))
        await writer.drain()
        data = await reader.read(1)
    except OSError as exc:
        raise NetworkUnreachable(f"{address}:{port}: {exc}") from exc
    finally:
        writer.close()
        with contextlib.suppress(OSError):
            await writer.wait_closed()

    if not data:
        raise NetworkUnreachable(f"{address}:{port}: closed without sending data")


def _found(
    address: str,
    port: int,
    method: DiscoveryMethod,
    name: str,
    started: float,
) -> Device:
    return Device(
        address=address,
        display_name=name,
        discovery_method=method,
        round_trip_ms=round((time.perf_counter() - started) * 1000),
        port=port,
    )


async def _probe_ports(
    session: aiohttp.ClientSession,
    address: str,
    ports: Sequence[int],
    timeout_ms: int,
) -> Device | None:
    for port in ports:
        started = time.perf_counter()
        try:
            await with_timeout(timeout_ms, http_ping(session, address, port))
        except (ProbeTimeout, NetworkUnreachable) as exc:
            logger.debug("No ping response from %s:%d (%s)", address, port, exc)
        else:
            logger.debug("Found %s at %s:%d via HTTP ping", HUB_NAME, address, port)
            return _found(address, port, "http-ping", HUB_NAME, started)

        try:
            await with_timeout(timeout_ms, port_open(address, port))
        except (ProbeTimeout, NetworkUnreachable) as exc:
            logger.debug("Port %d closed on %s (%s)", port, address, exc)
            continue

        logger.debug("Port %d open on %s", port, address)
        return _found(address, port, "port-open", PORT_OPEN_NAME, started)

    return None


async def probe_address(
    address: str,
    ports: Sequence[int],
    timeout_ms: int,
    *,
    session: aiohttp.ClientSession | None = None,
) -> Device | None:
    """Probe one address on each port in turn; the first hit wins.

    Returns ``None`` when no port answered either stage.
    """
    if session is not None:
        return await _probe_ports(session, address, ports, timeout_ms)

    async with create_probe_session(limit=1) as own_session:
        return await _probe_ports(own_session, address, ports, timeout_ms)


async def probe_manual(
    address: str,
    settings: ScanSettings,
    *,
    session: aiohttp.ClientSession | None = None,
) -> Device | None:
    """Probe a user-supplied address; a hit is tagged ``manual``."""
    address = address.strip()
    try:
        ipaddress.IPv4Address(address)
    except ValueError as exc:
        raise ValueError(f"Invalid IPv4 address: {address!r}") from exc

    logger.info("Probing %s on ports %s", address, settings.ports)
    device = await probe_address(
        address, settings.ports, settings.timeout_ms, session=session
    )
    if device is None:
        return None
    return device.model_copy(update={"discovery_method": "manual"})


async def connectivity_test(
    address: str,
    port: int = DEFAULT_HTTP_PORT,
    *,
    timeout_ms: int = CONNECTIVITY_TIMEOUT_MS,
) -> ConnectivityResult:
    """Check that a known device still answers its ping endpoint."""
    async with create_probe_session(limit=1) as session:
        try:
            await with_timeout(timeout_ms, http_ping(session, address, port))
        except (ProbeTimeout, NetworkUnreachable) as exc:
            logger.info("Connectivity test to %s:%d failed: %s", address, port, exc)
            return ConnectivityResult(
                reachable=False, explanation=NO_RESPONSE_EXPLANATION
            )

    logger.info("Connectivity test to %s:%d succeeded", address, port)
    return ConnectivityResult(reachable=True)
