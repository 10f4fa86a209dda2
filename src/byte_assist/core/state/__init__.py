"""Derived project state: git status plus last build outcome."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from byte_assist.core.exec import CommandExecutor
from byte_assist.core.state.build import BuildState, BuildStatus, load_build_state
from byte_assist.core.state.git import GitStatus, get_git_status, parse_git_status

__all__ = [
    "BuildState",
    "BuildStatus",
    "GitStatus",
    "ProjectState",
    "get_git_status",
    "get_project_state",
    "load_build_state",
    "parse_git_status",
]


@dataclass(frozen=True)
class ProjectState:
    """Git status and build state of one project, computed fresh per query."""

    git: GitStatus
    build: BuildState | None


def get_project_state(
    project_path: Path,
    executor: CommandExecutor | None = None,
    logger: logging.Logger | None = None,
) -> ProjectState:
    """Get the complete state for a project."""
    return ProjectState(
        git=get_git_status(project_path, executor=executor, logger=logger),
        build=load_build_state(project_path),
    )
