"""aiohttp session configuration for probing local devices."""

from __future__ import annotations

import aiohttp


def create_probe_session(limit: int = 40) -> aiohttp.ClientSession:
    """Create a session for plain-HTTP probes of LAN devices.

    Deadlines are enforced per attempt by the caller, so the session itself
    has no total timeout. Connections are not kept alive: each probe talks to
    a different host once.
    """
    connector = aiohttp.TCPConnector(
        limit=limit,
        limit_per_host=2,
        ssl=False,
        force_close=True,
    )
    return aiohttp.ClientSession(
        connector=connector,
        timeout=aiohttp.ClientTimeout(total=None),
    )
