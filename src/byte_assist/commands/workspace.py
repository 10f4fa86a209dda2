"""Workspace command group for byte-assist.

Manages the directories scanned for projects:
- `byte workspace list`: Show the primary workspace and registered paths
- `byte workspace add PATH`: Register an additional directory
- `byte workspace remove PATH`: Unregister a directory

Example:
    $ byte workspace add ~/work/clients
    $ byte workspace list
"""

import logging

import typer
from rich.markup import escape
from rich.table import Table

from byte_assist.cli_utils import EXIT_CONFIG_ERROR, EXIT_ERROR, _error, _success, console
from byte_assist.core.config import (
    ByteConfig,
    add_workspace_path,
    get_config_path,
    load_config,
    remove_workspace_path,
    save_config,
)
from byte_assist.core.exceptions import ConfigError, ValidationError
from byte_assist.core.safe_path import resolve_path

logger = logging.getLogger(__name__)

workspace_app = typer.Typer(
    name="workspace",
    help="Workspace path management commands",
    no_args_is_help=True,
)


def _load() -> ByteConfig:
    try:
        return load_config()
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None


def _save(config: ByteConfig) -> None:
    try:
        save_config(config)
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None


def _path_status(text: str) -> str:
    try:
        path = resolve_path(text)
    except ValidationError as e:
        return f"[red]invalid ({escape(e.rule)})[/red]"
    if not path.exists():
        return "[red]missing[/red]"
    if not path.expanded.is_dir():
        return "[red]not a directory[/red]"
    return "[green]ok[/green]"


@workspace_app.command(name="list")
def list_command() -> None:
    """Show the primary workspace and registered paths."""
    config = _load()

    table = Table(title="Workspace paths")
    table.add_column("Path", style="cyan")
    table.add_column("Kind")
    table.add_column("Status")

    primary_kind = "primary" if config.workspace.auto_scan else "primary (not scanned)"
    table.add_row(escape(config.workspace.path), primary_kind, _path_status(config.workspace.path))
    for text in config.workspace.registered:
        table.add_row(escape(text), "registered", _path_status(text))

    console.print(table)
    console.print(f"[dim]Config: {escape(str(get_config_path()))}[/dim]")


@workspace_app.command(name="add")
def add_command(
    path: str = typer.Argument(..., help="Directory to register (~ allowed)"),
) -> None:
    """Register an additional directory to scan for projects."""
    config = _load()
    try:
        updated = add_workspace_path(config, path)
    except ValidationError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None

    _save(updated)
    logger.info("Registered workspace path %s", path)
    _success(f"Added workspace path: {path}")


@workspace_app.command(name="remove")
def remove_command(
    path: str = typer.Argument(..., help="Registered directory to remove"),
) -> None:
    """Unregister a directory."""
    config = _load()
    try:
        updated = remove_workspace_path(config, path)
    except (ConfigError, ValidationError) as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None

    _save(updated)
    logger.info("Removed workspace path %s", path)
    _success(f"Removed workspace path: {path}")
