from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from roomfinder.config import Settings, get_settings, resolve_config_path
from roomfinder.models import Device


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def print_devices(console: Console, devices: Iterable[Device]) -> None:
    table = Table()
    table.add_column("Address", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Method", style="yellow")
    table.add_column("RTT", justify="right")
    table.add_column("Last seen")
    table.add_column("URL")

    for device in devices:
        rtt = "" if device.round_trip_ms is None else f"{device.round_trip_ms} ms"
        table.add_row(
            device.address,
            device.display_name,
            device.discovery_method,
            rtt,
            device.last_seen.astimezone().strftime("%H:%M:%S"),
            device.url,
        )

    console.print(table)
