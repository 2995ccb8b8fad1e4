from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn

from roomfinder.config import ScanSettings, update_settings
from roomfinder.core import demo_device, detect_local_prefix, discover_devices
from roomfinder.errors import OrchestratorDefect
from roomfinder.models import Device

from ..common import load_settings_or_exit, print_devices

logger = logging.getLogger(__name__)


async def run_scan(
    settings: ScanSettings, progress: Progress, cancel: asyncio.Event
) -> list[Device]:
    """Consume a scan, keeping the latest record per address."""
    task_id = progress.add_task("Scanning", total=1.0)
    devices: dict[str, Device] = {}

    def on_progress(fraction: float) -> None:
        progress.update(
            task_id,
            completed=fraction,
            description=f"Scanning ({len(devices)} found)",
        )

    loop = asyncio.get_running_loop()
    with contextlib.suppress(NotImplementedError, RuntimeError):
        loop.add_signal_handler(signal.SIGINT, cancel.set)
    try:
        async for device in discover_devices(on_progress, settings, cancel=cancel):
            devices[device.address] = device
            progress.console.print(
                f"[green]+[/green] {device.display_name} at {device.address}"
            )
    finally:
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.remove_signal_handler(signal.SIGINT)
    return list(devices.values())


def register(app: typer.Typer) -> None:
    @app.command()
    def scan(
        subnet: Annotated[
            list[str] | None,
            typer.Option(
                "--subnet", "-s", help="Subnet prefix to scan, e.g. 192.168.1."
            ),
        ] = None,
        port: Annotated[
            list[int] | None,
            typer.Option("--port", "-p", help="Candidate port, tried in order"),
        ] = None,
        timeout: Annotated[
            int | None,
            typer.Option("--timeout", "-t", help="Per-attempt timeout in ms"),
        ] = None,
        local: Annotated[
            bool,
            typer.Option("--local", help="Scan only the subnet of this machine"),
        ] = False,
        demo: Annotated[
            bool,
            typer.Option("--demo", help="Include the demo device in the results"),
        ] = False,
    ) -> None:
        """Scan subnets for SmartRoomHub devices."""
        console = Console()
        settings = load_settings_or_exit()

        changes: dict[str, object] = {}
        if local:
            try:
                subnet = [detect_local_prefix()]
            except RuntimeError as exc:
                typer.echo(str(exc), err=True)
                raise typer.Exit(1) from exc
        if subnet:
            changes["subnets"] = subnet
        if port:
            changes["ports"] = port
        if timeout is not None:
            changes["timeout_ms"] = timeout
        try:
            scanning = update_settings(settings, **changes).scanning
        except ValueError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(1) from exc

        console.print(
            f"Scanning {', '.join(f'{s}0/24' for s in scanning.subnets) or 'nothing'} "
            f"on ports {', '.join(map(str, scanning.ports))}..."
        )
        logger.info("Scan settings: timeout=%dms", scanning.timeout_ms)

        cancel = asyncio.Event()
        progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        )
        try:
            with progress:
                devices = asyncio.run(run_scan(scanning, progress, cancel))
        except OrchestratorDefect as exc:
            logger.error("Scan failed: %s", exc)
            console.print(
                "[red]✗[/red] Scan failed: could not complete the network scan."
            )
            raise typer.Exit(1) from exc

        if cancel.is_set():
            console.print("[yellow]![/yellow] Scan stopped by user.")

        if demo:
            devices.insert(0, demo_device())

        if not devices:
            console.print("No SmartRoomHub devices found.")
            return

        print_devices(console, devices)
        found = sum(1 for device in devices if device.discovery_method != "mock")
        console.print(f"\n[green]Found {found} device(s)[/green]")
