from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from roomfinder.config import (
    render_settings_toml,
    reset_settings,
    update_settings,
    write_settings,
)

from ..common import load_settings_or_exit, resolve_config_path_or_exit

app = typer.Typer(no_args_is_help=True, help="Show or change scan settings.")


@app.command("show")
def show_config() -> None:
    """Show current configuration."""
    settings = load_settings_or_exit()
    path, exists = resolve_config_path_or_exit(allow_missing=True)

    source = str(path) if exists else "defaults"
    typer.echo(f"Config source: {source}")
    typer.echo(render_settings_toml(settings))


@app.command("path")
def config_path() -> None:
    """Print the config file location."""
    path, _ = resolve_config_path_or_exit(allow_missing=True)
    typer.echo(str(path))


@app.command("set")
def set_config(
    subnet: Annotated[
        list[str] | None,
        typer.Option("--subnet", "-s", help="Replace subnet prefixes"),
    ] = None,
    port: Annotated[
        list[int] | None,
        typer.Option("--port", "-p", help="Replace candidate ports"),
    ] = None,
    timeout: Annotated[
        int | None, typer.Option("--timeout", "-t", help="Timeout in ms")
    ] = None,
    manual_ip: Annotated[
        str | None, typer.Option("--manual-ip", help="Default address for probe")
    ] = None,
) -> None:
    """Update scan settings and save them."""
    changes: dict[str, object] = {}
    if subnet:
        changes["subnets"] = subnet
    if port:
        changes["ports"] = port
    if timeout is not None:
        changes["timeout_ms"] = timeout
    if manual_ip is not None:
        changes["manual_ip"] = manual_ip
    if not changes:
        typer.echo("Nothing to change.", err=True)
        raise typer.Exit(1)

    settings = load_settings_or_exit()
    try:
        updated = update_settings(settings, **changes)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc

    path, _ = resolve_config_path_or_exit(allow_missing=True)
    write_settings(updated, path)
    Console().print(f"[green]✓[/green] Saved config: {path}")


@app.command("reset")
def reset_config() -> None:
    """Restore default scan settings."""
    path, _ = resolve_config_path_or_exit(allow_missing=True)
    write_settings(reset_settings(), path)
    Console().print(f"[green]✓[/green] Reset config: {path}")
