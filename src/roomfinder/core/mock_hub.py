"""Fake SmartRoomHub for development and testing."""

from __future__ import annotations

import asyncio
import logging

from aiohttp import web

from roomfinder.models import Device

from .prober import FALLBACK_PATH, HUB_NAME, PING_PATH

logger = logging.getLogger(__name__)

DEMO_ADDRESS = "192.168.1.100"

# 1x1 transparent ICO
FAVICON = bytes.fromhex(
    "0000010001000101000001002000300000001600000028000000010000000200"
    "0000010020000000000004000000000000000000000000000000000000000000"
    "000000000000"
)


def demo_device() -> Device:
    """Placeholder device shown before any scan has run."""
    return Device(
        address=DEMO_ADDRESS,
        display_name=f"{HUB_NAME} (Demo)",
        discovery_method="mock",
        round_trip_ms=42,
    )


def create_mock_hub_app(name: str = "mock-hub") -> web.Application:
    async def ping(request: web.Request) -> web.Response:
        logger.info("Ping from %s", request.remote)
        return web.json_response({"name": name, "status": "ok"})

    async def favicon(_request: web.Request) -> web.Response:
        return web.Response(body=FAVICON, content_type="image/x-icon")

    app = web.Application()
    app.router.add_get(PING_PATH, ping)
    app.router.add_get(FALLBACK_PATH, favicon)
    return app


async def run_mock_hub(
    host: str = "0.0.0.0", port: int = 8080, name: str = "mock-hub"
) -> None:
    """Serve the mock hub until cancelled."""
    runner = web.AppRunner(create_mock_hub_app(name))
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info("Mock hub '%s' listening on %s:%d", name, host, port)
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()
