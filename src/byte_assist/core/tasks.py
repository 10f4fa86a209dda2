"""Run build tasks and custom commands declared in a project manifest.

Only text stored in the project's byte.yaml can be run, through
TrustedShellText. Build tasks additionally record their outcome in
``.byte/state/build.json`` so the dashboard can show the last build.
"""

from __future__ import annotations

import logging
from enum import StrEnum

import yaml

from byte_assist.core.command_log import write_command_log
from byte_assist.core.discovery import DiscoveredProject
from byte_assist.core.exceptions import ManifestError, ProjectStateError
from byte_assist.core.exec import (
    CommandExecutor,
    CommandSpec,
    ExecutionResult,
    TrustedShellText,
    load_trusted_commands,
)
from byte_assist.core.manifest import manifest_path
from byte_assist.core.state.build import BuildState, BuildStatus, save_build_state

logger = logging.getLogger(__name__)


class CommandCategory(StrEnum):
    """Log category of a command, derived from its text."""

    GIT = "git"
    TEST = "test"
    LINT = "lint"
    BUILD = "build"
    OTHER = "other"


# Checked in this order: test is more specific than build
TEST_KEYWORDS = ("test", "spec", "coverage", "bench")
LINT_KEYWORDS = ("lint", "fmt", "format", "clippy", "check", "prettier", "eslint")
BUILD_KEYWORDS = ("build", "compile", "bundle", "dev", "run", "start", "watch", "serve")


def categorize_command(command: str) -> CommandCategory:
    """Categorize a command line by keyword.

    A leading ``cd <dir> &&`` is skipped. Git commands must start with
    ``git ``; everything else is matched by substring.

    Examples:
        >>> categorize_command("cargo clippy")
        <CommandCategory.LINT: 'lint'>
        >>> categorize_command("cd web && bun test")
        <CommandCategory.TEST: 'test'>

    """
    text = command.lower().strip()
    if text.startswith("cd ") and " && " in text:
        text = text.split(" && ", 1)[1].strip()

    if text.startswith("git "):
        return CommandCategory.GIT
    if any(kw in text for kw in TEST_KEYWORDS):
        return CommandCategory.TEST
    if any(kw in text for kw in LINT_KEYWORDS):
        return CommandCategory.LINT
    if any(kw in text for kw in BUILD_KEYWORDS):
        return CommandCategory.BUILD
    return CommandCategory.OTHER


def project_tasks(project: DiscoveredProject) -> list[TrustedShellText]:
    """Trusted build tasks and commands of a project, in manifest order.

    Raises:
        ManifestError: If the manifest cannot be read or parsed.

    """
    path = manifest_path(project.path)
    try:
        return load_trusted_commands(path)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ManifestError(f"Cannot read tasks from {path}: {e}", path=path) from e


def find_task(project: DiscoveredProject, task_name: str) -> TrustedShellText:
    """Look up a task by name; build tasks win over commands of the same name.

    Raises:
        ManifestError: If the manifest has no such task.

    """
    tasks = project_tasks(project)
    for task in tasks:
        if task.name == task_name:
            return task

    available = ", ".join(sorted({t.name for t in tasks})) or "none"
    raise ManifestError(
        f"Unknown task '{task_name}' for project {project.name} (available: {available})",
        path=manifest_path(project.path),
    )


def _save_build(project: DiscoveredProject, status: BuildStatus, task_name: str) -> None:
    try:
        save_build_state(project.path, BuildState.now(status, task_name))
    except OSError as e:
        raise ProjectStateError(f"Cannot write build state for {project.name}: {e}") from e


def run_task(
    project: DiscoveredProject,
    task_name: str,
    executor: CommandExecutor | None = None,
) -> ExecutionResult:
    """Run a manifest task with captured output.

    Build tasks write ``running`` build state before starting and
    ``success``/``failed`` afterwards. Every run is recorded in the
    project's command logs.

    Returns:
        Result of the command; a non-zero exit is returned, not raised.

    Raises:
        ManifestError: If the task does not exist.
        ExecutionError: If the command cannot be run.
        ProjectStateError: If build state or the command log cannot be
            written.

    """
    task = find_task(project, task_name)
    executor = executor or CommandExecutor()
    spec = CommandSpec.shell(task, working_dir=project.path)

    if task.is_build:
        _save_build(project, BuildStatus.RUNNING, task.name)

    logger.info("Running task '%s' in %s: %s", task.name, project.path, task.text)
    try:
        result = executor.execute(spec)
    except Exception:
        if task.is_build:
            try:
                _save_build(project, BuildStatus.FAILED, task.name)
            except ProjectStateError as state_error:
                logger.warning("%s", state_error)
        raise

    if task.is_build:
        status = BuildStatus.SUCCESS if result.success else BuildStatus.FAILED
        _save_build(project, status, task.name)

    category = categorize_command(task.text)
    try:
        write_command_log(project.path, category, task.text, result)
    except OSError as e:
        raise ProjectStateError(f"Cannot write command log for {project.name}: {e}") from e
    logger.info("Task '%s' finished with exit code %d", task.name, result.exit_code)
    return result
