from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console

from roomfinder.core import connectivity_test, probe_manual
from roomfinder.models import device_url

from ..common import load_settings_or_exit, print_devices


def register(app: typer.Typer) -> None:
    @app.command()
    def probe(
        address: Annotated[
            str | None,
            typer.Argument(help="IPv4 address to probe. Uses manual_ip if omitted."),
        ] = None,
    ) -> None:
        """Probe a single address on every configured port."""
        console = Console()
        settings = load_settings_or_exit().scanning

        target = address or settings.manual_ip
        if not target:
            typer.echo("No address given and manual_ip is not configured.", err=True)
            raise typer.Exit(1)

        try:
            device = asyncio.run(probe_manual(target, settings))
        except ValueError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(1) from exc

        if device is None:
            console.print(f"[yellow]![/yellow] Device not found at {target}")
            raise typer.Exit(1)

        print_devices(console, [device])

    @app.command()
    def connect(
        address: Annotated[str, typer.Argument(help="Device IPv4 address")],
        port: Annotated[
            int, typer.Option("--port", "-p", help="Port of the device UI")
        ] = 80,
    ) -> None:
        """Check that a device answers before opening its UI."""
        console = Console()
        console.print(f"Connecting to {address}:{port}...")

        result = asyncio.run(connectivity_test(address, port))
        if not result.reachable:
            console.print("[red]✗[/red] Connection failed")
            console.print(result.explanation or "An unknown error occurred.")
            raise typer.Exit(1)

        console.print(f"[green]✓[/green] Connected via {result.method}")
        console.print(f"Open the device UI at {device_url(address, port)}")
