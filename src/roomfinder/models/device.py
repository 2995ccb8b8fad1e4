"""Device models."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DiscoveryMethod = Literal["http-ping", "port-open", "manual", "mock", "mdns"]
DeviceStatus = Literal["online", "offline", "unknown"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def device_url(address: str, port: int | None = None) -> str:
    """URL of the web UI at ``address``; port 80 is left implicit."""
    if port is None or port == 80:
        return f"http://{address}"
    return f"http://{address}:{port}"


class Device(BaseModel):
    """A SmartRoomHub endpoint found by a probe."""

    model_config = {"frozen": True, "extra": "forbid"}

    address: str
    display_name: str
    discovery_method: DiscoveryMethod
    round_trip_ms: int | None = None
    last_seen: datetime = Field(default_factory=_utcnow)
    status: DeviceStatus = "online"
    port: int | None = Field(default=None, ge=1, le=65535)
    device_id: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("address")
    @classmethod
    def _check_address(cls, value: str) -> str:
        try:
            ipaddress.IPv4Address(value)
        except ValueError as exc:
            raise ValueError(f"not a dotted-quad IPv4 address: {value!r}") from exc
        return value

    @property
    def url(self) -> str:
        return device_url(self.address, self.port)


@dataclass
class ConnectivityResult:
    reachable: bool
    method: str = "HTTP Ping"
    explanation: str | None = None
