from __future__ import annotations

import os
from pathlib import Path

import platformdirs

APP_NAME = "roomfinder"
CONFIG_FILENAME = "config.toml"


def default_config_dir() -> Path:
    return Path(platformdirs.user_config_dir(APP_NAME))


def default_config_path() -> Path:
    return default_config_dir() / CONFIG_FILENAME


def expand_path(value: str) -> Path:
    return Path(os.path.expandvars(os.path.expanduser(value)))
