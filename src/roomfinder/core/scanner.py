from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator, Sequence

from roomfinder.config import ScanSettings
from roomfinder.errors import OrchestratorDefect, ScanAborted
from roomfinder.models import Device

from .http import create_probe_session
from .prober import probe_address
from .subnets import enumerate_addresses

logger = logging.getLogger(__name__)

CONCURRENCY_LIMIT = 40

ProgressCallback = Callable[[float], None]
ProbeFn = Callable[[str, Sequence[int], int], Awaitable[Device | None]]


def _waves(addresses: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    for start in range(0, len(addresses), size):
        yield addresses[start : start + size]


async def _settle_wave(
    addresses: Sequence[str],
    settings: ScanSettings,
    probe: ProbeFn,
    cancel: asyncio.Event | None,
) -> list[Device | None]:
    """Probe one wave concurrently and wait for every probe to settle.

    Results come back in address order. If ``cancel`` fires first, the
    remaining probes are cancelled and ``ScanAborted`` is raised carrying the
    results of the probes that had already finished.
    """
    tasks = [
        asyncio.create_task(probe(address, settings.ports, settings.timeout_ms))
        for address in addresses
    ]
    stopper = asyncio.create_task(cancel.wait()) if cancel is not None else None
    pending: set[asyncio.Future] = set(tasks)
    try:
        while pending:
            waiting = pending | {stopper} if stopper is not None else pending
            done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)
            pending -= done
            for task in done:
                if task is stopper:
                    continue
                error = task.exception()
                if error is not None:
                    raise OrchestratorDefect(f"probe task failed: {error!r}") from error
            if stopper is not None and stopper in done:
                settled = [
                    task.result() if task.done() and not task.cancelled() else None
                    for task in tasks
                ]
                raise ScanAborted(
                    f"cancelled with {len(pending)} probe(s) in flight", settled
                )
        return [task.result() for task in tasks]
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        if stopper is not None:
            stopper.cancel()
            tasks.append(stopper)
        await asyncio.gather(*tasks, return_exceptions=True)


async def discover_devices(
    on_progress: ProgressCallback,
    settings: ScanSettings,
    *,
    cancel: asyncio.Event | None = None,
    probe: ProbeFn | None = None,
) -> AsyncIterator[Device]:
    """Scan every host of ``settings.subnets`` and yield the devices found.

    Addresses are probed in waves of ``CONCURRENCY_LIMIT``; a wave starts only
    after the previous one has fully settled. After each wave the fraction of
    addresses done is passed to ``on_progress`` and the wave's devices are
    yielded in address order.

    Setting ``cancel`` stops the scan: it is checked before each wave, and a
    wave in flight when it fires has its unfinished probes cancelled; devices
    that wave had already found are still yielded in address order, with no
    progress reported for it. The stream then ends without error. Only
    ``OrchestratorDefect`` escapes.
    """
    try:
        addresses = enumerate_addresses(settings.subnets)
    except ValueError as exc:
        raise OrchestratorDefect(f"Cannot enumerate subnets: {exc}") from exc

    total = len(addresses)
    if total == 0:
        logger.info("No subnets to scan")
        on_progress(1.0)
        return

    logger.info(
        "Scanning %d addresses on %d subnet(s) (ports=%s, timeout=%dms)",
        total,
        len(settings.subnets),
        settings.ports,
        settings.timeout_ms,
    )

    async with contextlib.AsyncExitStack() as stack:
        if probe is None:
            session = await stack.enter_async_context(
                create_probe_session(limit=CONCURRENCY_LIMIT)
            )
            probe = functools.partial(probe_address, session=session)

        completed = 0
        found = 0
        for wave in _waves(addresses, CONCURRENCY_LIMIT):
            if cancel is not None and cancel.is_set():
                logger.info("Scan cancelled after %d of %d addresses", completed, total)
                return
            try:
                results = await _settle_wave(wave, settings, probe, cancel)
            except ScanAborted as exc:
                logger.info("Scan cancelled during wave at %s: %s", wave[0], exc)
                for device in exc.settled:
                    if device is not None:
                        yield device
                return

            completed += len(wave)
            on_progress(completed / total)
            for device in results:
                if device is not None:
                    found += 1
                    yield device

    logger.info("Scan complete: %d device(s) found", found)
