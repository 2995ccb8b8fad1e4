from __future__ import annotations

from .paths import APP_NAME, CONFIG_FILENAME, default_config_path, expand_path
from .settings import (
    CONFIG_ENV_VAR,
    DEFAULT_PORTS,
    DEFAULT_SUBNETS,
    MIN_TIMEOUT_MS,
    ScanSettings,
    Settings,
    get_settings,
    load_settings,
    render_settings_toml,
    reset_settings,
    resolve_config_path,
    update_settings,
    write_settings,
)

__all__ = [
    "APP_NAME",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "DEFAULT_PORTS",
    "DEFAULT_SUBNETS",
    "MIN_TIMEOUT_MS",
    "ScanSettings",
    "Settings",
    "default_config_path",
    "expand_path",
    "get_settings",
    "load_settings",
    "render_settings_toml",
    "reset_settings",
    "resolve_config_path",
    "update_settings",
    "write_settings",
]
