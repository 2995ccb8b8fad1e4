"""Error taxonomy for discovery."""

from __future__ import annotations


class DiscoveryError(Exception):
    """Base class for discovery errors."""


class ProbeTimeout(DiscoveryError, TimeoutError):
    """A probe attempt did not settle before its deadline."""


class NetworkUnreachable(DiscoveryError, ConnectionError):
    """Connection-level failure: refused, reset, no route or no data."""


class ScanAborted(DiscoveryError):
    """Cancellation was observed while a scan was running.

    ``settled`` holds the results of the probes that had already finished,
    in dispatch order.
    """

    def __init__(self, message: str, settled: list | None = None) -> None:
        super().__init__(message)
        self.settled = settled or []


class OrchestratorDefect(DiscoveryError, RuntimeError):
    """The scan machinery failed in a way no probe outcome explains."""
