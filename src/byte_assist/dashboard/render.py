"""Dashboard snapshot: one row per discovered project.

State is computed fresh for every render; nothing is cached between runs.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from byte_assist.core.discovery import DiscoveredProject
from byte_assist.core.exec import CommandExecutor
from byte_assist.core.state import BuildState, BuildStatus, GitStatus, ProjectState, get_project_state
from byte_assist.dashboard.time_format import format_relative_time

logger = logging.getLogger(__name__)

BUILD_STATUS_COLORS: dict[BuildStatus, str] = {
    BuildStatus.SUCCESS: "green",
    BuildStatus.FAILED: "red",
    BuildStatus.RUNNING: "yellow",
}


@dataclass(frozen=True)
class ProjectRow:
    """A discovered project together with its current state."""

    project: DiscoveredProject
    state: ProjectState


def build_dashboard(
    projects: Iterable[DiscoveredProject],
    executor: CommandExecutor | None = None,
) -> list[ProjectRow]:
    """Query state for each project, sorted by name."""
    executor = executor or CommandExecutor()
    rows = [
        ProjectRow(project=project, state=get_project_state(project.path, executor=executor))
        for project in projects
    ]
    rows.sort(key=lambda row: row.project.name.lower())
    logger.debug("Built dashboard with %d rows", len(rows))
    return rows


def render_git_status(status: GitStatus) -> str:
    """Format a git status as a compact plain-text summary.

    Examples:
        "main ↑2 ↓1 · 3 modified, 1 staged"
        "(detached HEAD) · clean"
        "not a repo"

    """
    if not status.is_repo:
        return "not a repo"

    parts = [status.branch or "(detached HEAD)"]
    if status.ahead:
        parts.append(f"↑{status.ahead}")
    if status.behind:
        parts.append(f"↓{status.behind}")
    branch = " ".join(parts)

    if status.is_clean:
        return f"{branch} · clean"

    changes = []
    if status.modified:
        changes.append(f"{status.modified} modified")
    if status.staged:
        changes.append(f"{status.staged} staged")
    if status.untracked:
        changes.append(f"{status.untracked} untracked")
    return f"{branch} · {', '.join(changes)}"


def render_build_state(build: BuildState | None, now: float | None = None) -> str:
    if build is None:
        return "never built"
    return f"{build.status} ({build.task}, {format_relative_time(build.timestamp, now)})"


def render_dashboard(rows: list[ProjectRow], console: Console) -> None:
    """Print the dashboard table."""
    if not rows:
        console.print("[yellow]No projects found.[/yellow]")
        return

    table = Table(title=f"Projects ({len(rows)})")
    table.add_column("Name", style="cyan")
    table.add_column("Ecosystem")
    table.add_column("Git")
    table.add_column("Last build")
    table.add_column("Path", style="dim")

    for row in rows:
        git = row.state.git
        git_text = escape(render_git_status(git))
        if git.is_repo and not git.is_clean:
            git_text = f"[yellow]{git_text}[/yellow]"

        build = row.state.build
        build_text = escape(render_build_state(build))
        if build is not None:
            color = BUILD_STATUS_COLORS.get(build.status, "white")
            build_text = f"[{color}]{build_text}[/{color}]"

        table.add_row(
            escape(row.project.name),
            escape(f"{row.project.ecosystem}/{row.project.project_type}"),
            git_text,
            build_text,
            escape(str(row.project.path)),
        )

    console.print(table)
