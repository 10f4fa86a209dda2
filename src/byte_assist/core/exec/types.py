"""Value types for command execution.

CommandSpec describes what to run; ExecutionResult describes what happened.
TrustedShellText marks shell command strings that were read from a project
configuration file, the only source allowed to reach ``sh -c``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import InitVar, dataclass, field, replace
from datetime import datetime, timedelta
from enum import StrEnum
from pathlib import Path
from types import MappingProxyType
from typing import Literal

import yaml

from byte_assist.core.platform_command import format_command, get_shell_program

# Issued only by load_trusted_commands(); guards TrustedShellText construction.
_CONFIG_FILE_TOKEN = object()

ShellTextKind = Literal["build", "command"]


class ExecutionMode(StrEnum):
    """How a command's standard streams are handled."""

    CAPTURED = "captured"
    INTERACTIVE = "interactive"


@dataclass(frozen=True)
class LocalTarget:
    """Run on this machine."""


@dataclass(frozen=True)
class RemoteTarget:
    """Run on a remote host over SSH.

    Not implemented: the executor rejects this target during validation.
    It exists so remote execution can be added without changing callers.
    """

    host: str
    user: str


ExecutionTarget = LocalTarget | RemoteTarget


@dataclass(frozen=True)
class TrustedShellText:
    """Shell command text taken from a project configuration file.

    Cannot be built from an arbitrary string: use load_trusted_commands().
    The construction token is an init-only value that is never stored, so
    ``dataclasses.replace`` cannot copy it onto new text.

    Attributes:
        name: Task or command name the text is stored under.
        text: The shell command line.
        source: Configuration file the text was read from.
        kind: 'build' for build tasks, 'command' for custom commands.

    """

    name: str
    text: str
    source: Path
    kind: ShellTextKind
    _token: InitVar[object]

    def __post_init__(self, _token: object) -> None:
        if _token is not _CONFIG_FILE_TOKEN:
            raise TypeError(
                "TrustedShellText can only be created from a configuration file "
                "via load_trusted_commands()"
            )

    @property
    def is_build(self) -> bool:
        return self.kind == "build"


def load_trusted_commands(config_file: Path) -> list[TrustedShellText]:
    """Read shell commands from the ``build`` and ``commands`` tables of a file.

    Args:
        config_file: Project manifest to read.

    Returns:
        Build tasks first, then custom commands, each in file order.
        Entries whose value is not a string are skipped.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not UTF-8.
        yaml.YAMLError: If the file is not valid YAML.

    """
    data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        return []

    trusted: list[TrustedShellText] = []
    kinds: tuple[tuple[str, ShellTextKind], ...] = (("build", "build"), ("commands", "command"))
    for table, kind in kinds:
        entries = data.get(table) or {}
        if not isinstance(entries, dict):
            continue
        for name, text in entries.items():
            if isinstance(text, str) and text.strip():
                trusted.append(
                    TrustedShellText(str(name), text, config_file, kind, _CONFIG_FILE_TOKEN)
                )
    return trusted


@dataclass(frozen=True)
class CommandSpec:
    """Specification of one external command.

    Attributes:
        program: Program name, checked against the allow-list.
        args: Arguments passed verbatim (no shell interpretation).
        working_dir: Directory to run in, or None for the current one.
        env: Environment overrides merged over the inherited environment.
        mode: Captured or interactive streams.
        target: Where to run; only LocalTarget is supported.
        timeout: Seconds before the process is killed, or None.
        shell_text: Set only by CommandSpec.shell().

    """

    program: str
    args: tuple[str, ...] = ()
    working_dir: Path | None = None
    env: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    mode: ExecutionMode = ExecutionMode.CAPTURED
    target: ExecutionTarget = field(default_factory=LocalTarget)
    timeout: float | None = None
    shell_text: TrustedShellText | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))
        if self.working_dir is not None and not isinstance(self.working_dir, Path):
            object.__setattr__(self, "working_dir", Path(self.working_dir))

    @classmethod
    def of(cls, program: str, *args: str, working_dir: Path | None = None) -> CommandSpec:
        """Build a spec for a program and its arguments."""
        return cls(program=program, args=args, working_dir=working_dir)

    @classmethod
    def git(cls, subcommand: str, *args: str, working_dir: Path | None = None) -> CommandSpec:
        return cls(program="git", args=(subcommand, *args), working_dir=working_dir)

    @classmethod
    def shell(cls, text: TrustedShellText, *, working_dir: Path | None = None) -> CommandSpec:
        """Build ``sh -c <text>`` for a trusted configuration command.

        Raises:
            TypeError: If text is not a TrustedShellText (e.g. a plain str).

        """
        if not isinstance(text, TrustedShellText):
            raise TypeError(
                f"Shell commands require TrustedShellText, got {type(text).__name__}"
            )
        return cls(
            program=get_shell_program(),
            args=("-c", text.text),
            working_dir=working_dir,
            shell_text=text,
        )

    def with_args(self, *args: str) -> CommandSpec:
        if self.shell_text is not None:
            raise TypeError("Cannot append arguments to a shell command")
        return replace(self, args=(*self.args, *args))

    def in_dir(self, working_dir: Path) -> CommandSpec:
        return replace(self, working_dir=Path(working_dir))

    def with_env(self, **overrides: str) -> CommandSpec:
        return replace(self, env={**self.env, **overrides})

    def with_timeout(self, seconds: float) -> CommandSpec:
        return replace(self, timeout=seconds)

    def interactive(self) -> CommandSpec:
        return replace(self, mode=ExecutionMode.INTERACTIVE)

    @property
    def argv(self) -> tuple[str, ...]:
        return (self.program, *self.args)

    @property
    def display(self) -> str:
        """Command line for logs and messages."""
        if self.shell_text is not None:
            return self.shell_text.text
        return format_command(self.argv)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a captured command. Created only by CommandExecutor.

    Attributes:
        command: Argument vector that was run.
        stdout: Captured standard output.
        stderr: Captured standard error.
        exit_code: Process exit status (-N when killed by signal N).
        duration: Wall-clock time from spawn to exit.
        timestamp: UTC completion time.

    """

    command: tuple[str, ...]
    stdout: str
    stderr: str
    exit_code: int
    duration: timedelta
    timestamp: datetime

    @property
    def success(self) -> bool:
        return self.exit_code == 0
