from __future__ import annotations

from .mock_hub import create_mock_hub_app, demo_device, run_mock_hub
from .prober import connectivity_test, probe_address, probe_manual
from .scanner import CONCURRENCY_LIMIT, discover_devices
from .subnets import detect_local_prefix, enumerate_addresses
from .timeouts import with_timeout

__all__ = [
    "CONCURRENCY_LIMIT",
    "connectivity_test",
    "create_mock_hub_app",
    "demo_device",
    "detect_local_prefix",
    "discover_devices",
    "enumerate_addresses",
    "probe_address",
    "probe_manual",
    "run_mock_hub",
    "with_timeout",
]
