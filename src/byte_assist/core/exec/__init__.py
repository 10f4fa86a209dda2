"""Secure execution of allow-listed external programs.

Usage:
    from byte_assist.core.exec import CommandExecutor, CommandSpec

    executor = CommandExecutor()
    result = executor.execute(CommandSpec.git("status", "--porcelain=v1", working_dir=path))
    if result.success:
        ...
"""

from byte_assist.core.exec.allowlist import DEFAULT_ALLOWED_PROGRAMS, SHELL_PROGRAMS, AllowList
from byte_assist.core.exec.executor import CommandExecutor, get_default_editor
from byte_assist.core.exec.types import (
    CommandSpec,
    ExecutionMode,
    ExecutionResult,
    ExecutionTarget,
    LocalTarget,
    RemoteTarget,
    TrustedShellText,
    load_trusted_commands,
)

__all__ = [
    "DEFAULT_ALLOWED_PROGRAMS",
    "SHELL_PROGRAMS",
    "AllowList",
    "CommandExecutor",
    "CommandSpec",
    "ExecutionMode",
    "ExecutionResult",
    "ExecutionTarget",
    "LocalTarget",
    "RemoteTarget",
    "TrustedShellText",
    "get_default_editor",
    "load_trusted_commands",
]
