"""Secure external command execution.

Every command is validated before anything is spawned:

1. The program must be on the allow-list (exact name match).
2. The target must be local; remote execution is not supported yet.
3. Shell programs (sh, bash) are only accepted for specs built by
   CommandSpec.shell(), whose text comes from a project configuration file.
   Runtime user input is never joined into a shell string.

Commands are spawned from an argument vector (``shell=False``), so
arguments are never interpreted by a shell.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import time
from datetime import UTC, datetime, timedelta

from byte_assist.core.exceptions import (
    CommandFailedError,
    CommandTimeoutError,
    ProgramNotAllowedError,
    RemoteExecutionNotSupportedError,
    SpawnError,
    UntrustedShellError,
)
from byte_assist.core.exec.allowlist import SHELL_PROGRAMS, AllowList
from byte_assist.core.exec.types import CommandSpec, ExecutionMode, ExecutionResult, RemoteTarget

logger = logging.getLogger(__name__)

COMMON_EDITORS = ("vim", "nano", "vi", "emacs")
FALLBACK_EDITOR = "vi"


class CommandExecutor:
    """Validates and runs CommandSpecs.

    Args:
        allowlist: Permitted programs. Defaults to DEFAULT_ALLOWED_PROGRAMS.
        logger: Logger for execution events. Defaults to this module's logger.

    """

    def __init__(
        self,
        allowlist: AllowList | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.allowlist = allowlist if allowlist is not None else AllowList()
        self.logger = logger or logging.getLogger(__name__)

    def validate(self, spec: CommandSpec) -> None:
        """Check a spec against the execution policy.

        Raises:
            ProgramNotAllowedError: Program is not on the allow-list.
            RemoteExecutionNotSupportedError: Spec targets a remote host.
            UntrustedShellError: Shell program without trusted shell text.

        """
        if spec.program not in self.allowlist:
            raise ProgramNotAllowedError(spec.program, self.allowlist.programs)

        if isinstance(spec.target, RemoteTarget):
            raise RemoteExecutionNotSupportedError(
                f"Remote execution on {spec.target.user}@{spec.target.host} is not yet supported"
            )

        if spec.program in SHELL_PROGRAMS:
            trusted = spec.shell_text
            if trusted is None or spec.args != ("-c", trusted.text):
                raise UntrustedShellError(
                    f"'{spec.program}' may only run commands from project configuration "
                    "files (use CommandSpec.shell with TrustedShellText)"
                )

    def _environment(self, spec: CommandSpec) -> dict[str, str] | None:
        if not spec.env:
            return None
        env = os.environ.copy()
        env.update(spec.env)
        return env

    def execute(self, spec: CommandSpec) -> ExecutionResult:
        """Run a command and capture its output.

        Blocks until the process exits. A non-zero exit status is returned
        as data in the result, not raised.

        Raises:
            ExecutionError: If validation fails, the process cannot be
                spawned, or the spec's timeout expires.
            ValueError: If the spec is interactive.

        """
        if spec.mode is not ExecutionMode.CAPTURED:
            raise ValueError(f"Use execute_interactive() for interactive command '{spec.display}'")
        self.validate(spec)

        self.logger.debug("Executing: %s (cwd=%s)", spec.display, spec.working_dir or ".")
        start = time.monotonic()
        try:
            completed = subprocess.run(
                list(spec.argv),
                cwd=spec.working_dir,
                env=self._environment(spec),
                capture_output=True,
                text=True,
                errors="replace",
                timeout=spec.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandTimeoutError(
                f"Command '{spec.display}' timed out after {spec.timeout}s",
                timeout=spec.timeout or 0.0,
            ) from e
        except OSError as e:
            raise SpawnError(
                f"Failed to execute command '{spec.program}': {e}", program=spec.program
            ) from e

        duration = timedelta(seconds=time.monotonic() - start)
        result = ExecutionResult(
            command=spec.argv,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
            exit_code=completed.returncode,
            duration=duration,
            timestamp=datetime.now(UTC),
        )
        self.logger.debug(
            "Finished: %s (exit=%d, %.2fs)",
            spec.display,
            result.exit_code,
            duration.total_seconds(),
        )
        return result

    def execute_interactive(self, spec: CommandSpec) -> None:
        """Run a command attached to the caller's terminal.

        The child inherits stdin, stdout and stderr, so its output cannot be
        captured. No other terminal output may happen until it exits.

        Raises:
            ExecutionError: If validation fails or the process cannot be
                spawned.
            CommandFailedError: If the process exits non-zero.
            ValueError: If the spec is not interactive.

        """
        if spec.mode is not ExecutionMode.INTERACTIVE:
            raise ValueError(f"Use execute() for captured command '{spec.display}'")
        self.validate(spec)

        self.logger.debug("Executing interactively: %s", spec.display)
        try:
            returncode = subprocess.call(
                list(spec.argv),
                cwd=spec.working_dir,
                env=self._environment(spec),
                timeout=spec.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandTimeoutError(
                f"Interactive command '{spec.display}' timed out after {spec.timeout}s",
                timeout=spec.timeout or 0.0,
            ) from e
        except OSError as e:
            raise SpawnError(
                f"Failed to execute interactive command '{spec.program}': {e}",
                program=spec.program,
            ) from e

        if returncode != 0:
            raise CommandFailedError(
                f"Interactive command '{spec.program}' failed with exit code: {returncode}",
                exit_code=returncode,
            )


def get_default_editor(executor: CommandExecutor | None = None) -> str:
    """Pick the user's terminal editor.

    Checks $EDITOR, then $VISUAL, then looks for common editors with
    ``which``. Falls back to 'vi'.
    """
    for var in ("EDITOR", "VISUAL"):
        value = os.environ.get(var, "").strip()
        if value:
            return value

    executor = executor or CommandExecutor()
    for editor in COMMON_EDITORS:
        try:
            if executor.execute(CommandSpec.of("which", editor)).success:
                return editor
        except (ProgramNotAllowedError, SpawnError):
            # `which` itself may be missing (e.g. minimal containers)
            if shutil.which(editor):
                return editor
    return FALLBACK_EDITOR
