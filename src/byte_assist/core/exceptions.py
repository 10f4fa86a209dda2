"""Exception hierarchy for byte-assist.

All errors raised by the core derive from ByteError so the CLI can catch a
single base class and print a message instead of a traceback.

Validation errors carry a ``rule`` attribute naming the specific rule that
was violated. Execution errors distinguish structural rejections (program
not on the allow-list, untrusted shell text) from OS-level spawn failures.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from byte_assist.core.project_name import NameRule

__all__ = [
    "ByteError",
    "ValidationError",
    "EmptyPathError",
    "RemotePathError",
    "PathTraversalError",
    "PathNotFoundError",
    "NotADirectoryPathError",
    "PathNotWritableError",
    "ProjectNameError",
    "ExecutionError",
    "ProgramNotAllowedError",
    "UntrustedShellError",
    "RemoteExecutionNotSupportedError",
    "SpawnError",
    "CommandTimeoutError",
    "CommandFailedError",
    "ConfigError",
    "ManifestError",
    "ScaffoldError",
    "ProjectStateError",
]


class ByteError(Exception):
    """Base class for all byte-assist errors."""


# =============================================================================
# Validation errors
# =============================================================================


class ValidationError(ByteError):
    """Malformed or disallowed input, raised before any side effect.

    Attributes:
        rule: Machine-readable name of the violated rule.

    """

    rule: str = "invalid"

    def __init__(self, message: str, *, rule: str | None = None) -> None:
        super().__init__(message)
        if rule is not None:
            self.rule = rule


class EmptyPathError(ValidationError):
    """Path input was empty or whitespace only."""

    rule = "empty_path"


class RemotePathError(ValidationError):
    """Path input uses a UNC, SSH or remote URL form."""

    rule = "remote_path"


class PathTraversalError(ValidationError):
    """Path component would escape its base directory."""

    rule = "path_traversal"


class PathNotFoundError(ValidationError):
    """Path does not exist on disk."""

    rule = "not_found"


class NotADirectoryPathError(ValidationError):
    """Path exists but is not a directory."""

    rule = "not_a_directory"


class PathNotWritableError(ValidationError):
    """Directory cannot be written to."""

    rule = "not_writable"


class ProjectNameError(ValidationError):
    """Candidate project name violates a naming rule.

    Attributes:
        rule: The first NameRule the name violated.
        name: The rejected name, verbatim.

    """

    def __init__(self, message: str, *, rule: NameRule, name: str) -> None:
        super().__init__(message, rule=str(rule))
        self.rule = rule
        self.name = name


# =============================================================================
# Execution errors
# =============================================================================


class ExecutionError(ByteError):
    """A command could not be executed."""


class ProgramNotAllowedError(ExecutionError):
    """Program is not on the allow-list. Never retried.

    Attributes:
        program: The rejected program name.
        allowed: Sorted allow-list at the time of rejection.

    """

    def __init__(self, program: str, allowed: Iterable[str]) -> None:
        self.program = program
        self.allowed = tuple(sorted(allowed))
        super().__init__(
            f"Command '{program}' is not on the allow-list. "
            f"Allowed: {', '.join(self.allowed)}"
        )


class UntrustedShellError(ExecutionError):
    """Shell program invoked without trusted configuration text."""


class RemoteExecutionNotSupportedError(ExecutionError):
    """Command targets a remote host, which is not supported yet."""


class SpawnError(ExecutionError):
    """The OS failed to start the process (missing binary, permission denied).

    Attributes:
        program: Program that failed to start.

    """

    def __init__(self, message: str, *, program: str) -> None:
        super().__init__(message)
        self.program = program


class CommandTimeoutError(ExecutionError):
    """Process exceeded its configured timeout and was killed.

    Attributes:
        timeout: Timeout in seconds.

    """

    def __init__(self, message: str, *, timeout: float) -> None:
        super().__init__(message)
        self.timeout = timeout


class CommandFailedError(ExecutionError):
    """Interactive process exited with a non-zero status.

    Attributes:
        exit_code: Exit status of the process (-1 if killed by a signal).

    """

    def __init__(self, message: str, *, exit_code: int) -> None:
        super().__init__(message)
        self.exit_code = exit_code


# =============================================================================
# Configuration, manifest, scaffolding and project state errors
# =============================================================================


class ConfigError(ByteError):
    """Global configuration could not be loaded or saved."""


class ManifestError(ByteError):
    """Project manifest is missing, unreadable or invalid.

    Attributes:
        path: Manifest path the error relates to, if known.

    """

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ScaffoldError(ByteError):
    """A new project could not be created."""


class ProjectStateError(ByteError):
    """Build state or command logs under .byte/ could not be written."""
