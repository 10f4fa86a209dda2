"""Tests for the dashboard snapshot."""

from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock

from rich.console import Console

from byte_assist.core.discovery import DiscoveredProject
from byte_assist.core.exec import CommandExecutor, ExecutionResult
from byte_assist.core.manifest import ProjectManifest
from byte_assist.core.state import BuildState, BuildStatus, GitStatus, ProjectState
from byte_assist.dashboard import (
    ProjectRow,
    build_dashboard,
    render_build_state,
    render_dashboard,
    render_git_status,
)
from byte_assist.dashboard.time_format import format_relative_time


def make_project(path: Path, name: str) -> DiscoveredProject:
    return DiscoveredProject(
        path=path,
        manifest=ProjectManifest(name=name, project_type="cli", ecosystem="rust"),
    )


class TestRenderGitStatus:
    """Tests for render_git_status."""

    def test_not_a_repo(self) -> None:
        assert render_git_status(GitStatus.not_a_repo()) == "not a repo"

    def test_clean(self) -> None:
        assert render_git_status(GitStatus(branch="main")) == "main · clean"

    def test_detached(self) -> None:
        assert render_git_status(GitStatus(branch=None)) == "(detached HEAD) · clean"

    def test_changes_and_tracking(self) -> None:
        status = GitStatus(branch="dev", modified=3, staged=1, untracked=2, ahead=2, behind=1)

        assert render_git_status(status) == "dev ↑2 ↓1 · 3 modified, 1 staged, 2 untracked"


class TestRenderBuildState:
    """Tests for render_build_state and relative time."""

    def test_never_built(self) -> None:
        assert render_build_state(None) == "never built"

    def test_build(self) -> None:
        build = BuildState(timestamp=1000, status=BuildStatus.FAILED, task="release")

        assert render_build_state(build, now=1300) == "failed (release, 5m ago)"

    def test_relative_time(self) -> None:
        assert format_relative_time(0) == "unknown"
        assert format_relative_time(100, now=50) == "just now"
        assert format_relative_time(100, now=120) == "20s ago"
        assert format_relative_time(0.5, now=3600 * 2 + 15 * 60) == "2h 14m ago"
        assert format_relative_time(1, now=1 + 3600) == "1h ago"
        assert format_relative_time(1, now=1 + 86400 * 3) == "3d ago"
        assert format_relative_time(1, now=1 + 31536000) == "1y ago"


class TestBuildDashboard:
    """Tests for build_dashboard."""

    def test_rows_sorted_by_name(self, tmp_path: Path) -> None:
        executor = MagicMock(spec=CommandExecutor)
        projects = [make_project(tmp_path / "b", "beta"), make_project(tmp_path / "a", "Alpha")]

        rows = build_dashboard(projects, executor=executor)

        assert [row.project.name for row in rows] == ["Alpha", "beta"]
        assert all(row.state.git == GitStatus.not_a_repo() for row in rows)
        executor.execute.assert_not_called()

    def test_git_queried_for_repositories(self, tmp_path: Path) -> None:
        repo = tmp_path / "repo"
        (repo / ".git").mkdir(parents=True)
        executor = MagicMock(spec=CommandExecutor)
        executor.execute.return_value = ExecutionResult(
            command=("git",),
            stdout="## main\n M x\n",
            stderr="",
            exit_code=0,
            duration=timedelta(0),
            timestamp=datetime.now(UTC),
        )

        rows = build_dashboard([make_project(repo, "repo")], executor=executor)

        assert rows[0].state.git.modified == 1


class TestRenderDashboard:
    """Tests for render_dashboard."""

    def test_table(self, tmp_path: Path) -> None:
        console = Console(record=True, width=200)
        rows = [
            ProjectRow(
                project=make_project(tmp_path / "app", "app"),
                state=ProjectState(
                    git=GitStatus(branch="main", modified=1),
                    build=BuildState(timestamp=0, status=BuildStatus.SUCCESS, task="release"),
                ),
            )
        ]

        render_dashboard(rows, console)

        text = console.export_text()
        assert "Projects (1)" in text
        assert "app" in text
        assert "rust/cli" in text
        assert "main · 1 modified" in text
        assert "success (release, unknown)" in text

    def test_empty(self) -> None:
        console = Console(record=True, width=120)

        render_dashboard([], console)

        assert "No projects found" in console.export_text()
