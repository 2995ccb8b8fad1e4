from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from roomfinder.errors import ProbeTimeout

T = TypeVar("T")


async def with_timeout(timeout_ms: float, awaitable: Awaitable[T]) -> T:
    """Race ``awaitable`` against a deadline of ``timeout_ms`` milliseconds.

    Whichever side loses is cleaned up before returning: the operation is
    cancelled on timeout, and the deadline is discarded once the operation
    settles. Failures of the operation propagate unchanged.
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_ms / 1000)
    except (asyncio.TimeoutError, TimeoutError) as exc:
        raise ProbeTimeout(f"no result within {timeout_ms:g} ms") from exc
