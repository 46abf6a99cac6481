"""Mini README: Entry point CLI for launching the drone dispatch controller.

This script exposes a Typer CLI that starts the FastAPI application with
uvicorn. Settings come from ``DRONEDISPATCH_*`` environment variables and,
with ``--config``, from a JSON file such as ``config.dev.json``; command-line
host and port take precedence over both.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from dronedispatch.configuration import get_settings, load_settings
from dronedispatch.logging_utils import configure_root_logger

cli = typer.Typer(help="Launch and manage the drone dispatch controller API.")


@cli.command()
def run(
    config: Optional[Path] = typer.Option(None, help="Path to a JSON config file."),
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    if config is not None:
        # The factory runs in the uvicorn worker, which reads the file from the env.
        os.environ["DRONEDISPATCH_CONFIG_FILE"] = str(config)
        get_settings.cache_clear()
    try:
        settings = load_settings(config) if config is not None else get_settings()
    except ValueError as error:
        typer.echo(f"Invalid configuration: {error}", err=True)
        raise typer.Exit(code=1) from error

    effective_host = host or settings.api_host
    effective_port = port or settings.api_port
    configure_root_logger(settings.log_level)

    typer.echo(
        "Initializing Drones Management API on "
        f"{effective_host}:{effective_port}.\n"
        f"Open {settings.local_url}:{effective_port}/drone/all to list the fleet."
    )
    uvicorn.run(
        "dronedispatch.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


if __name__ == "__main__":
    cli()
