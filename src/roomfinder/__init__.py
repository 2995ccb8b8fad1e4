"""roomfinder - discover SmartRoomHub devices on the local network."""

from __future__ import annotations

from importlib.metadata import version

from .config import ScanSettings, Settings, get_settings
from .core import (
    CONCURRENCY_LIMIT,
    connectivity_test,
    discover_devices,
    enumerate_addresses,
    probe_address,
    probe_manual,
)
from .errors import (
    DiscoveryError,
    NetworkUnreachable,
    OrchestratorDefect,
    ProbeTimeout,
    ScanAborted,
)
from .models import ConnectivityResult, Device

__all__ = [
    "CONCURRENCY_LIMIT",
    "ConnectivityResult",
    "Device",
    "DiscoveryError",
    "NetworkUnreachable",
    "OrchestratorDefect",
    "ProbeTimeout",
    "ScanAborted",
    "ScanSettings",
    "Settings",
    "__version__",
    "connectivity_test",
    "discover_devices",
    "enumerate_addresses",
    "get_settings",
    "probe_address",
    "probe_manual",
]

__version__ = version("roomfinder")
