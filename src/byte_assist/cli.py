"""Command-line interface for byte-assist.

Commands:
    byte init ECOSYSTEM TYPE NAME   Scaffold a new project in the workspace
    byte discover                   List projects in all workspace roots
    byte status [PATH]              Git and build state of one project
    byte dashboard                  State of every discovered project
    byte run PROJECT_PATH TASK      Run a build task or command from byte.yaml
    byte logs PROJECT_PATH          Recent command logs of a project
    byte edit PROJECT_PATH          Open byte.yaml in the default editor
    byte workspace list|add|remove  Manage workspace paths
"""

from __future__ import annotations

import logging
import shlex

import typer
from rich.markup import escape
from rich.table import Table

from byte_assist.cli_utils import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    _error,
    _info,
    _setup_logging,
    _success,
    _validate_project_path,
    _warning,
    console,
)
from byte_assist.commands.workspace import workspace_app
from byte_assist.core.command_log import format_log_time, recent_logs
from byte_assist.core.config import ByteConfig, build_allowlist, load_config
from byte_assist.core.discovery import DiscoveredProject, discover_projects
from byte_assist.core.exceptions import ByteError, ConfigError
from byte_assist.core.exec import CommandExecutor, CommandSpec, get_default_editor
from byte_assist.core.manifest import load_manifest, manifest_path
from byte_assist.core.scaffold import init_project
from byte_assist.core.state import get_project_state
from byte_assist.core.tasks import run_task
from byte_assist.dashboard import (
    ProjectRow,
    build_dashboard,
    render_build_state,
    render_dashboard,
    render_git_status,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="byte",
    help="Scaffold, discover and inspect projects in your workspace",
    no_args_is_help=True,
)
app.add_typer(workspace_app, name="workspace")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output with debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors to the console",
    ),
) -> None:
    """byte-assist: project scaffolding and workspace overview."""
    _setup_logging(verbose=verbose, quiet=quiet)


def _load_config() -> ByteConfig:
    try:
        return load_config()
    except ConfigError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from None


def _executor(config: ByteConfig) -> CommandExecutor:
    return CommandExecutor(allowlist=build_allowlist(config))


def _load_project(project: str) -> DiscoveredProject:
    project_path = _validate_project_path(project)
    try:
        manifest = load_manifest(project_path)
    except ByteError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None
    return DiscoveredProject(path=project_path, manifest=manifest)


@app.command(name="init")
def init_command(
    ecosystem: str = typer.Argument(..., help="Ecosystem: rust, go or bun"),
    project_type: str = typer.Argument(..., metavar="TYPE", help="Project type (cli, lib, api, ...)"),
    name: str = typer.Argument(..., help="Project directory name"),
    workspace: str | None = typer.Option(
        None,
        "--workspace",
        "-w",
        help="Workspace directory (default: from config)",
    ),
    description: str | None = typer.Option(
        None,
        "--description",
        "-d",
        help="One-line project description",
    ),
) -> None:
    """Create a new project with byte.yaml, .byte/ metadata and a git repository."""
    config = _load_config()
    target = workspace or config.workspace.path

    try:
        project_path = init_project(
            target,
            ecosystem,
            project_type,
            name,
            executor=_executor(config),
            description=description,
        )
    except ByteError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None

    _success(f"Created {ecosystem} {project_type} project '{name}' at {project_path}")


@app.command(name="discover")
def discover_command() -> None:
    """List projects found in the workspace and registered paths."""
    config = _load_config()
    result = discover_projects(config)

    for failure in result.failures:
        _warning(f"{failure.path}: {failure.reason}")

    if not result.projects:
        _info("No projects found")
        return

    table = Table(title=f"Discovered projects ({len(result.projects)})")
    table.add_column("Name", style="cyan")
    table.add_column("Ecosystem")
    table.add_column("Type")
    table.add_column("Description")
    table.add_column("Path", style="dim")

    for project in sorted(result.projects, key=lambda p: p.name.lower()):
        table.add_row(
            escape(project.name),
            escape(project.ecosystem),
            escape(project.project_type),
            escape(project.description),
            escape(str(project.path)),
        )
    console.print(table)


@app.command(name="status")
def status_command(
    path: str = typer.Argument(".", help="Project directory (default: current directory)"),
) -> None:
    """Show git status and last build of one project."""
    config = _load_config()
    project_path = _validate_project_path(path)

    state = get_project_state(project_path, executor=_executor(config))
    console.print(f"[bold]Project:[/bold] {escape(str(project_path))}")
    console.print(f"[bold]Git:[/bold] {escape(render_git_status(state.git))}")
    console.print(f"[bold]Build:[/bold] {escape(render_build_state(state.build))}")


@app.command(name="dashboard")
def dashboard_command() -> None:
    """Show the state of every discovered project."""
    config = _load_config()
    result = discover_projects(config)

    for failure in result.failures:
        _warning(f"{failure.path}: {failure.reason}")

    rows: list[ProjectRow] = build_dashboard(result.projects, executor=_executor(config))
    render_dashboard(rows, console)


@app.command(name="run")
def run_command(
    project: str = typer.Argument(..., help="Project directory"),
    task: str = typer.Argument(..., help="Build task or command name from byte.yaml"),
) -> None:
    """Run a build task or custom command declared in byte.yaml."""
    config = _load_config()
    discovered = _load_project(project)

    try:
        result = run_task(discovered, task, executor=_executor(config))
    except ByteError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None

    if result.stdout:
        console.print(escape(result.stdout.rstrip()))
    if result.stderr:
        console.print(f"[dim]{escape(result.stderr.rstrip())}[/dim]")

    if not result.success:
        _error(f"Task '{task}' failed with exit code {result.exit_code}")
        raise typer.Exit(code=EXIT_ERROR)
    _success(f"Task '{task}' completed in {result.duration.total_seconds():.2f}s")


@app.command(name="logs")
def logs_command(
    project: str = typer.Argument(..., help="Project directory"),
    category: str | None = typer.Option(
        None,
        "--category",
        "-c",
        help="Only show one category (git, test, lint, build, other)",
    ),
    limit: int = typer.Option(10, "--limit", "-n", help="Maximum number of logs"),
) -> None:
    """List the most recent command logs of a project."""
    project_path = _validate_project_path(project)
    logs = recent_logs(project_path, category=category, limit=limit)

    if not logs:
        _info("No command logs")
        return

    table = Table(title="Recent command logs")
    table.add_column("Time")
    table.add_column("Category", style="cyan")
    table.add_column("File", style="dim")
    for log in logs:
        table.add_row(format_log_time(log), log.category, escape(str(log.path)))
    console.print(table)


@app.command(name="edit")
def edit_command(
    project: str = typer.Argument(..., help="Project directory"),
) -> None:
    """Open the project's byte.yaml in the default editor."""
    config = _load_config()
    project_path = _validate_project_path(project)
    manifest_file = manifest_path(project_path)
    if not manifest_file.exists():
        _error(f"No {manifest_file.name} in {project_path}")
        raise typer.Exit(code=EXIT_ERROR)

    executor = _executor(config)
    editor_command = get_default_editor(executor)
    try:
        editor, *editor_args = shlex.split(editor_command)
    except ValueError as e:
        _error(f"Cannot parse editor command {editor_command!r}: {e}")
        raise typer.Exit(code=EXIT_ERROR) from None
    spec = CommandSpec.of(editor, *editor_args, str(manifest_file), working_dir=project_path)

    try:
        executor.execute_interactive(spec.interactive())
    except ByteError as e:
        _error(str(e))
        raise typer.Exit(code=EXIT_ERROR) from None


def main() -> None:
    """Entry point for the ``byte`` console script."""
    app()


if __name__ == "__main__":
    main()
