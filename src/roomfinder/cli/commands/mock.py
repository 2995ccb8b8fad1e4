from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from roomfinder.core import run_mock_hub


def register(app: typer.Typer) -> None:
    @app.command()
    def mock(
        name: str = typer.Option("mock-hub", "--name", "-n", help="Hub name"),
        host: str = typer.Option("0.0.0.0", "--host", help="Address to bind"),
        port: int = typer.Option(8080, "--port", "-p", help="Port to listen on"),
    ) -> None:
        """Run a mock SmartRoomHub for development."""
        console = Console()
        console.print(f"Starting mock hub '{name}' on {host}:{port}...")
        console.print("Press Ctrl+C to stop.\n")

        try:
            asyncio.run(run_mock_hub(host=host, port=port, name=name))
        except KeyboardInterrupt:
            console.print("\n[green]Mock hub stopped.[/green]")
