#!/usr/bin/env python3

from __future__ import annotations
import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from shared.config import load_config
from shared.errors import ConfigError
from shared.log import configure_root_logging, get_logger
from .console_input import ConsoleLineReader
from .render import print_error
from .session import run_session

app = typer.Typer(help="SWSC console chat client")
console = Console()
logger = get_logger(__name__)

USAGE = "Usage: swsc [--host <host>] [--port <port>] --email <email> --pass <password>"


@app.command()
def run(
    host: Optional[str] = typer.Option(None, "--host", envvar="SWSC_HOST", help="Service host [default: http://localhost]"),
    port: Optional[str] = typer.Option(None, "--port", envvar="SWSC_PORT", help="Service port [default: 3030]"),
    email: Optional[str] = typer.Option(None, "--email", envvar="SWSC_EMAIL", help="Account email"),
    password: Optional[str] = typer.Option(None, "--pass", envvar="SWSC_PASS", help="Account password"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="YAML config file [default: ~/.swsc/config.yaml]"),
):
    """Log in, pick a conversation and chat in it."""
    configure_root_logging("WARNING")
    try:
        config = load_config(config_path, host=host, port=port)
    except ConfigError as e:
        print_error(console, str(e))
        console.print(f"[magenta]{USAGE}[/magenta]")
        raise typer.Exit(code=2)

    try:
        code = asyncio.run(run_session(config, email, password, ConsoleLineReader(), console))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        code = 130
    raise typer.Exit(code=code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
