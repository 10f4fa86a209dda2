"""Shared helpers for byte-assist CLI commands.

Exit codes, the shared rich console, logging setup and message helpers used
by cli.py and the command sub-apps.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from byte_assist.core.exceptions import ValidationError
from byte_assist.core.safe_path import SafePath

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2

LOG_DIR_ENV = "BYTE_LOG_DIR"
DEFAULT_LOG_DIR = Path.home() / ".byte" / "logs"
LOG_FILENAME = "byte.log"
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# Shared console for all command output
console = Console()
err_console = Console(stderr=True)


def get_log_dir() -> Path:
    override = os.environ.get(LOG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return DEFAULT_LOG_DIR


def _setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure root logging for a CLI run.

    Console output goes to stderr through rich: DEBUG with --verbose,
    ERROR with --quiet, WARNING otherwise. Everything from INFO up is also
    appended to ``~/.byte/logs/byte.log`` (override with BYTE_LOG_DIR).
    Calling this again replaces the handlers it installed.
    """
    if verbose:
        console_level = logging.DEBUG
    elif quiet:
        console_level = logging.ERROR
    else:
        console_level = logging.WARNING

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_byte_handler", False):
            root.removeHandler(handler)
            handler.close()

    stream_handler = RichHandler(console=err_console, show_path=False, show_time=verbose)
    stream_handler.setLevel(console_level)
    stream_handler._byte_handler = True  # type: ignore[attr-defined]
    root.addHandler(stream_handler)

    log_dir = get_log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILENAME, encoding="utf-8")
    except OSError as e:
        root.warning("File logging disabled (%s): %s", log_dir, e)
    else:
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        file_handler._byte_handler = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def _error(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")


def _warning(message: str) -> None:
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}")


def _info(message: str) -> None:
    console.print(f"[blue]Info:[/blue] {escape(message)}")


def _success(message: str) -> None:
    console.print(f"[green]✓[/green] {escape(message)}")


def _validate_project_path(project: str) -> Path:
    """Resolve a project directory argument or exit with EXIT_ERROR."""
    try:
        return SafePath.project_root(project).as_path()
    except ValidationError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None
