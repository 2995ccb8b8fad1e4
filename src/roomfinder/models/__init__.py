"""Data models for roomfinder."""

from roomfinder.models.device import (
    ConnectivityResult,
    Device,
    DeviceStatus,
    DiscoveryMethod,
    device_url,
)

__all__ = [
    "ConnectivityResult",
    "Device",
    "DeviceStatus",
    "DiscoveryMethod",
    "device_url",
]
