"""Create a new project inside the workspace.

Layout produced for ``init_project("~/projects", "rust", "cli", "hello")``:

    ~/projects/hello/
        .byte/logs/        command logs (ignored by git)
        .byte/state/       build state (ignored by git)
        target/            build artifacts
        byte.yaml          project manifest
        .gitignore         contains .byte/
        ...                files created by the ecosystem's init tool

The name is validated before anything touches the disk. Ecosystem tools and
git run through the command executor, so they are subject to the same
allow-list as every other external command.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from byte_assist.core.exceptions import ManifestError, ScaffoldError
from byte_assist.core.exec import CommandExecutor, CommandSpec
from byte_assist.core.manifest import KnownEcosystemRule, ProjectManifest, save_manifest
from byte_assist.core.project_name import validate_project_name
from byte_assist.core.safe_path import SafePath
from byte_assist.core.state.build import STATE_DIR
from byte_assist.git.gitignore import ensure_gitignore

logger = logging.getLogger(__name__)

BYTE_DIR = ".byte"
LOGS_DIR = Path(BYTE_DIR) / "logs"
ARTIFACTS_DIR = "target"

SUPPORTED_ECOSYSTEMS: tuple[str, ...] = ("rust", "go", "bun")


def _rust_layout(project_path: Path, name: str) -> list[CommandSpec]:
    return [CommandSpec.of("cargo", "init", "--name", name, working_dir=project_path)]


def _go_layout(project_path: Path, name: str) -> list[CommandSpec]:
    cmd_dir = project_path / "cmd" / name
    cmd_dir.mkdir(parents=True, exist_ok=True)
    (project_path / "internal").mkdir(exist_ok=True)
    (project_path / "pkg").mkdir(exist_ok=True)
    (cmd_dir / "main.go").write_text(
        'package main\n\nimport "fmt"\n\nfunc main() {\n'
        f'    fmt.Println("Hello from {name}!")\n}}\n',
        encoding="utf-8",
    )
    return [CommandSpec.of("go", "mod", "init", name, working_dir=project_path)]


def _bun_layout(project_path: Path, name: str) -> list[CommandSpec]:
    src_dir = project_path / "src"
    src_dir.mkdir(exist_ok=True)
    (src_dir / "index.ts").write_text(f'console.log("Hello from {name}!");\n', encoding="utf-8")
    return [CommandSpec.of("bun", "init", "-y", working_dir=project_path)]


_ECOSYSTEM_LAYOUTS: dict[str, Callable[[Path, str], list[CommandSpec]]] = {
    "rust": _rust_layout,
    "go": _go_layout,
    "bun": _bun_layout,
}


def _layout_files(
    layout: Callable[[Path, str], list[CommandSpec]], project_path: Path, name: str
) -> list[CommandSpec]:
    """Create the ecosystem's starter files and return its setup commands."""
    try:
        return layout(project_path, name)
    except OSError as e:
        raise ScaffoldError(f"Failed to create starter files in {project_path}: {e}") from e


def _run_setup_step(executor: CommandExecutor, spec: CommandSpec) -> None:
    """Run a setup command; a non-zero exit is logged, not raised."""
    result = executor.execute(spec)
    if not result.success:
        logger.warning(
            "'%s' exited with code %d: %s",
            spec.display,
            result.exit_code,
            result.stderr.strip(),
        )


def init_project(
    workspace: str,
    ecosystem: str,
    project_type: str,
    name: str,
    executor: CommandExecutor | None = None,
    description: str | None = None,
) -> Path:
    """Scaffold a new project directory with manifest and git repository.

    Args:
        workspace: Workspace directory as typed by the user (``~`` allowed).
            Created if it does not exist.
        ecosystem: Ecosystem name (rust, go, bun). Unknown ecosystems get
            the generic layout and a warning.
        project_type: Free-form project type stored in the manifest.
        name: Project directory name.
        executor: Executor for ecosystem and git commands.
        description: Optional manifest description.

    Returns:
        Absolute path of the new project.

    Raises:
        ProjectNameError: If name is invalid (nothing is created).
        ValidationError: If the workspace path is invalid or not writable.
        ScaffoldError: If the project directory already exists, the type
            or ecosystem is blank, or a file cannot be written.
        ExecutionError: If a setup tool is not allowed or cannot be spawned.

    """
    validate_project_name(name)

    workspace_path = SafePath.from_user_input(workspace)
    if not workspace_path.exists():
        try:
            workspace_path.expanded.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ScaffoldError(f"Failed to create workspace {workspace_path}: {e}") from e
        workspace_path = workspace_path.refresh()
    workspace_path.validate_writable()

    project = workspace_path.join(name)
    project_path = project.as_path()
    if project.exists():
        raise ScaffoldError(f"Project directory already exists: {project_path}")

    try:
        manifest = ProjectManifest(
            name=name,
            project_type=project_type,
            ecosystem=ecosystem,
            description=description,
        )
    except PydanticValidationError as e:
        raise ScaffoldError(f"Invalid project settings: {e}") from e
    try:
        project_path.mkdir()
        (project_path / LOGS_DIR).mkdir(parents=True)
        (project_path / STATE_DIR).mkdir(parents=True)
        (project_path / ARTIFACTS_DIR).mkdir()
        save_manifest(project_path, manifest)
    except OSError as e:
        raise ScaffoldError(f"Failed to create project {project_path}: {e}") from e

    logger.info("Created %s %s project at %s", ecosystem, project_type, project_path)

    executor = executor or CommandExecutor()

    try:
        KnownEcosystemRule(SUPPORTED_ECOSYSTEMS).validate(manifest)
    except ManifestError as e:
        logger.warning("No setup available: %s", e)
        setup_steps: list[CommandSpec] = []
    else:
        setup_steps = _layout_files(_ECOSYSTEM_LAYOUTS[ecosystem], project_path, name)
    for spec in setup_steps:
        _run_setup_step(executor, spec)

    try:
        ensure_gitignore(project_path)
    except OSError as e:
        raise ScaffoldError(f"Failed to write .gitignore in {project_path}: {e}") from e

    for spec in (
        CommandSpec.git("init", working_dir=project_path),
        CommandSpec.git("add", ".", working_dir=project_path),
        CommandSpec.git("commit", "-m", f"Initial commit: {name} project", working_dir=project_path),
    ):
        _run_setup_step(executor, spec)

    return project_path.absolute()
