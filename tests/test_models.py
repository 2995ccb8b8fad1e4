from __future__ import annotations

import pytest
from pydantic import ValidationError

from roomfinder.models import Device, device_url


def _device(**overrides) -> Device:
    fields = {
        "address": "192.168.1.20",
        "display_name": "SmartRoomHub",
        "discovery_method": "http-ping",
    }
    fields.update(overrides)
    return Device(**fields)


def test_defaults():
    device = _device()
    assert device.status == "online"
    assert device.last_seen.tzinfo is not None
    assert device.metadata == {}


def test_last_seen_serialises_as_iso8601():
    data = _device().model_dump(mode="json")
    assert "T" in data["last_seen"]


def test_rejects_non_ipv4_address():
    with pytest.raises(ValidationError):
        _device(address="::1")


def test_rejects_unknown_method():
    with pytest.raises(ValidationError):
        _device(discovery_method="ssdp")


def test_device_is_immutable():
    device = _device()
    with pytest.raises(ValidationError):
        device.address = "192.168.1.21"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("port", "url"),
    [
        (None, "http://192.168.1.20"),
        (80, "http://192.168.1.20"),
        (3000, "http://192.168.1.20:3000"),
    ],
)
def test_url(port, url):
    assert _device(port=port).url == url


def test_device_url_matches_device_property():
    assert device_url("10.0.0.9") == "http://10.0.0.9"
    assert device_url("10.0.0.9", 80) == "http://10.0.0.9"
    assert device_url("10.0.0.9", 3000) == "http://10.0.0.9:3000"
    assert device_url("10.0.0.9", 8080) == _device(address="10.0.0.9", port=8080).url
