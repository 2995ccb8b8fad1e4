from __future__ import annotations

from typing import Annotated

import typer

from roomfinder.utils.logging import setup_logging

from .commands import config as config_cmd
from .commands.init import register as register_init
from .commands.mock import register as register_mock
from .commands.probe import register as register_probe
from .commands.scan import register as register_scan

app = typer.Typer(
    help="roomfinder - find SmartRoomHub devices on your network",
    no_args_is_help=True,
)

app.add_typer(config_cmd.app, name="config")

register_init(app)
register_scan(app)
register_probe(app)
register_mock(app)


@app.callback(invoke_without_command=True)
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit"),
    ] = False,
) -> None:
    """roomfinder CLI."""
    setup_logging()

    if version:
        from importlib.metadata import version as get_version

        typer.echo(f"roomfinder version {get_version('roomfinder')}")
        raise typer.Exit()
