from __future__ import annotations

import ipaddress
import json
import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from .paths import default_config_path, expand_path

CONFIG_ENV_VAR = "ROOMFINDER_CONFIG"

DEFAULT_SUBNETS = ["192.168.1.", "192.168.0.", "10.0.0."]
DEFAULT_PORTS = [80, 443, 3000, 8080]
MIN_TIMEOUT_MS = 500


def _unique(values: list[Any]) -> list[Any]:
    return list(dict.fromkeys(values))


class ScanSettings(BaseModel):
    """Inputs for one scan. Immutable for the duration of the scan."""

    model_config = {"frozen": True, "extra": "forbid"}

    subnets: list[str] = Field(default_factory=lambda: list(DEFAULT_SUBNETS))
    ports: list[int] = Field(default_factory=lambda: list(DEFAULT_PORTS), min_length=1)
    timeout_ms: int = Field(default=3000, ge=MIN_TIMEOUT_MS, le=60_000)
    manual_ip: str = ""

    @field_validator("subnets")
    @classmethod
    def _check_subnets(cls, value: list[str]) -> list[str]:
        for prefix in value:
            if not prefix.endswith("."):
                raise ValueError(f"subnet prefix must end with '.': {prefix!r}")
            try:
                ipaddress.IPv4Address(f"{prefix}0")
            except ValueError as exc:
                raise ValueError(
                    f"subnet prefix must be three IPv4 octets: {prefix!r}"
                ) from exc
        return _unique(value)

    @field_validator("ports")
    @classmethod
    def _check_ports(cls, value: list[int]) -> list[int]:
        for port in value:
            if not 1 <= port <= 65535:
                raise ValueError(f"port out of range: {port}")
        return _unique(value)

    @field_validator("manual_ip")
    @classmethod
    def _check_manual_ip(cls, value: str) -> str:
        value = value.strip()
        if value:
            ipaddress.IPv4Address(value)
        return value


class Settings(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    scanning: ScanSettings = Field(default_factory=ScanSettings)


def resolve_config_path(allow_missing: bool = False) -> tuple[Path, bool]:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        path = expand_path(env_path)
        if not allow_missing and not path.exists():
            raise FileNotFoundError(f"{CONFIG_ENV_VAR} points to missing file: {path}")
        return path, path.exists()

    path = default_config_path()
    return path, path.exists()


def load_settings(path: Path) -> Settings:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"Invalid TOML in config file: {path}\n{exc}") from exc

    try:
        return Settings.model_validate(data or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid config file: {path}\n{exc}") from exc


@lru_cache
def get_settings() -> Settings:
    path, exists = resolve_config_path(allow_missing=False)
    if exists:
        return load_settings(path)
    return Settings()


def update_settings(settings: Settings, **changes: Any) -> Settings:
    """Return a copy of ``settings`` with scanning fields replaced by ``changes``."""
    merged = {**settings.scanning.model_dump(), **changes}
    try:
        return Settings(scanning=ScanSettings.model_validate(merged))
    except ValidationError as exc:
        raise ValueError(f"Invalid settings\n{exc}") from exc


def reset_settings() -> Settings:
    return Settings()


def _toml_value(value: Any) -> str:
    return json.dumps(value)


def render_settings_toml(settings: Settings) -> str:
    scanning = settings.scanning
    lines = [
        "# roomfinder configuration",
        "",
        "[scanning]",
        f"subnets = {_toml_value(scanning.subnets)}",
        f"ports = {_toml_value(scanning.ports)}",
        f"timeout_ms = {scanning.timeout_ms}",
        f"manual_ip = {_toml_value(scanning.manual_ip)}",
        "",
    ]
    return "\n".join(lines)


def write_settings(settings: Settings, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_settings_toml(settings))
