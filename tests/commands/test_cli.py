"""Tests for the byte CLI."""

from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml
from typer.testing import CliRunner

from byte_assist.cli import app
from byte_assist.cli_utils import EXIT_CONFIG_ERROR, EXIT_ERROR, EXIT_SUCCESS
from byte_assist.core.config import get_config_path, load_config
from byte_assist.core.exec import ExecutionResult
from byte_assist.core.state.build import BuildStatus, load_build_state

runner = CliRunner()


def ok_result(stdout: str = "", exit_code: int = 0) -> ExecutionResult:
    return ExecutionResult(
        command=(),
        stdout=stdout,
        stderr="",
        exit_code=exit_code,
        duration=timedelta(seconds=0.25),
        timestamp=datetime.now(UTC),
    )


def write_config(data: dict) -> Path:
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data))
    return path


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    ws = tmp_path / "ws"
    ws.mkdir()
    write_config({"workspace": {"path": str(ws)}})
    return ws


class TestAppBasics:
    """Application wiring."""

    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == EXIT_SUCCESS
        for command in ("init", "discover", "status", "dashboard", "run", "edit", "workspace"):
            assert command in result.output

    def test_invalid_config_exit_code(self) -> None:
        write_config({"workspace": {"auto_scan": "perhaps"}})

        result = runner.invoke(app, ["discover"])

        assert result.exit_code == EXIT_CONFIG_ERROR
        assert "Invalid config" in result.output

    def test_log_file_written(self, workspace: Path, isolate_user_dirs: Path) -> None:
        runner.invoke(app, ["--verbose", "discover"])

        assert (isolate_user_dirs / "logs" / "byte.log").exists()


class TestInitCommand:
    """Tests for `byte init`."""

    def test_creates_project(self, workspace: Path) -> None:
        with patch("byte_assist.cli.init_project", return_value=workspace / "app") as mock_init:
            result = runner.invoke(app, ["init", "rust", "cli", "app"])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "Created rust cli project 'app'" in result.output
        args = mock_init.call_args.args
        assert args == (str(workspace), "rust", "cli", "app")

    def test_workspace_option(self, tmp_path: Path) -> None:
        with patch("byte_assist.cli.init_project", return_value=tmp_path / "x") as mock_init:
            result = runner.invoke(app, ["init", "go", "api", "x", "--workspace", str(tmp_path)])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert mock_init.call_args.args[0] == str(tmp_path)

    def test_disk_error_reported(self, workspace: Path) -> None:
        with (
            patch(
                "byte_assist.core.exec.executor.CommandExecutor.execute",
                return_value=ok_result(),
            ),
            patch(
                "byte_assist.core.scaffold.ensure_gitignore",
                side_effect=PermissionError("read-only file system"),
            ),
        ):
            result = runner.invoke(app, ["init", "rust", "cli", "app"])

        assert result.exit_code == EXIT_ERROR
        assert "Failed to write .gitignore" in result.output
        assert "Traceback" not in result.output

    def test_invalid_name(self, workspace: Path) -> None:
        result = runner.invoke(app, ["init", "rust", "cli", "node_modules"])

        assert result.exit_code == EXIT_ERROR
        assert "reserved" in result.output
        assert not (workspace / "node_modules").exists()


class TestDiscoverCommand:
    """Tests for `byte discover`."""

    def test_lists_projects(self, workspace: Path, make_project) -> None:
        make_project(workspace / "alpha", description="First one")
        make_project(workspace / "beta", ecosystem="go")

        result = runner.invoke(app, ["discover"])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "alpha" in result.output
        assert "beta" in result.output
        assert "First one" in result.output

    def test_no_projects(self, workspace: Path) -> None:
        result = runner.invoke(app, ["discover"])

        assert result.exit_code == EXIT_SUCCESS
        assert "No projects found" in result.output

    def test_failures_reported(self, workspace: Path, tmp_path: Path) -> None:
        write_config(
            {"workspace": {"path": str(workspace), "registered": [str(tmp_path / "gone")]}}
        )

        result = runner.invoke(app, ["discover"])

        assert result.exit_code == EXIT_SUCCESS
        assert "does not exist" in result.output


class TestStatusAndDashboard:
    """Tests for `byte status` and `byte dashboard`."""

    def test_status_plain_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["status", str(tmp_path)])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "not a repo" in result.output
        assert "never built" in result.output

    def test_status_missing_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["status", str(tmp_path / "missing")])

        assert result.exit_code == EXIT_ERROR
        assert "does not exist" in result.output

    def test_dashboard(self, workspace: Path, make_project) -> None:
        make_project(workspace / "app")

        result = runner.invoke(app, ["dashboard"])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "Projects (1)" in result.output
        assert "not a repo" in result.output


class TestRunCommand:
    """Tests for `byte run`."""

    def test_runs_build_task(self, tmp_path: Path, make_project) -> None:
        project_dir = tmp_path / "app"
        make_project(project_dir, build={"release": "cargo build --release"})

        with patch(
            "byte_assist.core.exec.executor.CommandExecutor.execute",
            return_value=ok_result(stdout="Finished\n"),
        ):
            result = runner.invoke(app, ["run", str(project_dir), "release"])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "Finished" in result.output
        assert "Task 'release' completed" in result.output
        state = load_build_state(project_dir)
        assert state is not None
        assert state.status is BuildStatus.SUCCESS

    def test_failed_task_exit_code(self, tmp_path: Path, make_project) -> None:
        project_dir = tmp_path / "app"
        make_project(project_dir, commands={"lint": "cargo clippy"})

        with patch(
            "byte_assist.core.exec.executor.CommandExecutor.execute",
            return_value=ok_result(exit_code=2),
        ):
            result = runner.invoke(app, ["run", str(project_dir), "lint"])

        assert result.exit_code == EXIT_ERROR
        assert "failed with exit code 2" in result.output

    def test_state_write_error_reported(self, tmp_path: Path, make_project) -> None:
        project_dir = tmp_path / "app"
        make_project(project_dir, build={"release": "cargo build --release"})

        with patch(
            "byte_assist.core.tasks.save_build_state",
            side_effect=PermissionError("read-only file system"),
        ):
            result = runner.invoke(app, ["run", str(project_dir), "release"])

        assert result.exit_code == EXIT_ERROR
        assert "Cannot write build state" in result.output

    def test_unknown_task(self, tmp_path: Path, make_project) -> None:
        project_dir = tmp_path / "app"
        make_project(project_dir)

        result = runner.invoke(app, ["run", str(project_dir), "deploy"])

        assert result.exit_code == EXIT_ERROR
        assert "Unknown task 'deploy'" in result.output

    def test_missing_manifest(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["run", str(tmp_path), "release"])

        assert result.exit_code == EXIT_ERROR
        assert "Cannot read manifest" in result.output

    def test_allowlist_from_config(self, tmp_path: Path, make_project) -> None:
        write_config({"exec": {"allowed_programs": ["git"]}})
        project_dir = tmp_path / "app"
        make_project(project_dir, commands={"hello": "echo hi"})

        result = runner.invoke(app, ["run", str(project_dir), "hello"])

        assert result.exit_code == EXIT_ERROR
        assert "not on the allow-list" in result.output


class TestLogsCommand:
    """Tests for `byte logs`."""

    def test_no_logs(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["logs", str(tmp_path)])

        assert result.exit_code == EXIT_SUCCESS
        assert "No command logs" in result.output

    def test_lists_logs_after_run(self, tmp_path: Path, make_project) -> None:
        project_dir = tmp_path / "app"
        make_project(project_dir, commands={"lint": "cargo clippy"})
        with patch(
            "byte_assist.core.exec.executor.CommandExecutor.execute",
            return_value=ok_result(),
        ):
            runner.invoke(app, ["run", str(project_dir), "lint"])

        result = runner.invoke(app, ["logs", str(project_dir), "--category", "lint"])

        assert result.exit_code == EXIT_SUCCESS, result.output
        assert "lint" in result.output


class TestEditCommand:
    """Tests for `byte edit`."""

    def test_opens_manifest_in_editor(
        self, tmp_path: Path, make_project, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("EDITOR", "vim -n")
        project_dir = tmp_path / "app"
        manifest = make_project(project_dir)

        with patch("subprocess.call", return_value=0) as mock_call:
            result = runner.invoke(app, ["edit", str(project_dir)])

        assert result.exit_code == EXIT_SUCCESS, result.output
        argv = mock_call.call_args.args[0]
        assert argv[:2] == ["vim", "-n"]
        assert Path(argv[2]).resolve() == manifest.resolve()

    def test_editor_not_allowed(
        self, tmp_path: Path, make_project, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("EDITOR", "code")
        make_project(tmp_path / "app")

        with patch("subprocess.call") as mock_call:
            result = runner.invoke(app, ["edit", str(tmp_path / "app")])

        assert result.exit_code == EXIT_ERROR
        assert "not on the allow-list" in result.output
        mock_call.assert_not_called()

    def test_unparseable_editor(
        self, tmp_path: Path, make_project, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("EDITOR", "vim '-n")
        make_project(tmp_path / "app")

        with patch("subprocess.call") as mock_call:
            result = runner.invoke(app, ["edit", str(tmp_path / "app")])

        assert result.exit_code == EXIT_ERROR
        assert "Cannot parse editor command" in result.output
        mock_call.assert_not_called()

    def test_missing_manifest(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["edit", str(tmp_path)])

        assert result.exit_code == EXIT_ERROR
        assert "No byte.yaml" in result.output


class TestWorkspaceCommands:
    """Tests for `byte workspace`."""

    def test_add_list_remove(self, workspace: Path, tmp_path: Path) -> None:
        extra = tmp_path / "extra"
        extra.mkdir()

        added = runner.invoke(app, ["workspace", "add", str(extra)])
        assert added.exit_code == EXIT_SUCCESS, added.output
        assert load_config().workspace.registered == [str(extra)]

        listed = runner.invoke(app, ["workspace", "list"])
        assert listed.exit_code == EXIT_SUCCESS
        assert "registered" in listed.output
        assert "primary" in listed.output

        removed = runner.invoke(app, ["workspace", "remove", str(extra)])
        assert removed.exit_code == EXIT_SUCCESS, removed.output
        assert load_config().workspace.registered == []

    def test_add_duplicate(self, workspace: Path) -> None:
        result = runner.invoke(app, ["workspace", "add", str(workspace)])

        assert result.exit_code == EXIT_ERROR
        assert "primary workspace" in result.output

    def test_remove_unknown(self, workspace: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, ["workspace", "remove", str(tmp_path / "nope")])

        assert result.exit_code == EXIT_ERROR
        assert "not found" in result.output

    def test_add_missing(self, workspace: Path, tmp_path: Path) -> None:
        result = runner.invoke(app, ["workspace", "add", str(tmp_path / "nope")])

        assert result.exit_code == EXIT_ERROR
        assert "does not exist" in result.output
