"""Safe handling of user-supplied paths.

A SafePath keeps three representations of one logical path:

- ``original``: verbatim user input, for display and config storage
- ``expanded``: home shorthand (``~``) replaced with an absolute path
- ``canonical``: symlinks resolved, absolute; None until the path exists

Remote paths (UNC shares, ``user@host:path``, ssh/sftp/smb/nfs URLs) are
rejected outright: only local filesystem paths are supported.

Usage:
    from byte_assist.core.safe_path import resolve_path

    workspace = resolve_path("~/projects")
    workspace.validate_writable()
    project_dir = workspace.join("my-app")
"""

from __future__ import annotations

import logging
import os
import stat
import sys
from pathlib import Path

from byte_assist.core.exceptions import (
    EmptyPathError,
    NotADirectoryPathError,
    PathNotFoundError,
    PathNotWritableError,
    PathTraversalError,
    RemotePathError,
)

logger = logging.getLogger(__name__)

IS_WINDOWS = sys.platform == "win32"

REMOTE_URL_SCHEMES = ("ssh://", "sftp://", "smb://", "nfs://")

# Name of the probe file written by validate_writable()
WRITE_PROBE_NAME = ".byte_write_test"


def _reject_remote_paths(text: str) -> None:
    """Raise RemotePathError for network or remote path forms."""
    if text.startswith("\\\\"):
        raise RemotePathError(
            f"Network UNC paths not yet supported: {text}. "
            "Remote execution is planned for a future release."
        )

    # user@host:path. On Windows a drive letter (C:\...) also has a colon,
    # so only treat it as remote when both markers are present.
    if not IS_WINDOWS and "@" in text and ":" in text:
        raise RemotePathError(
            f"SSH/remote paths not yet supported: {text}. "
            "Remote execution is planned for a future release."
        )

    if text.startswith(REMOTE_URL_SCHEMES):
        raise RemotePathError(
            f"Remote URL paths not yet supported: {text}. "
            "Remote execution is planned for a future release."
        )


def _canonicalize(path: Path) -> Path | None:
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return None


class SafePath:
    """Validated local path with original, expanded and canonical forms.

    Instances are immutable value objects. Two SafePaths are equal when
    their canonical forms match (both exist), otherwise when their expanded
    forms match.
    """

    __slots__ = ("_original", "_expanded", "_canonical")

    def __init__(self, original: str, expanded: Path, canonical: Path | None) -> None:
        self._original = original
        self._expanded = expanded
        self._canonical = canonical

    @classmethod
    def from_user_input(cls, text: str) -> SafePath:
        """Create a SafePath from user input.

        Args:
            text: Raw path string as typed or stored in config.

        Returns:
            SafePath with canonical set only if the path exists.

        Raises:
            EmptyPathError: If input is empty or whitespace only.
            RemotePathError: If input is a UNC, SSH or remote URL path.

        """
        if not text or not text.strip():
            raise EmptyPathError("Path cannot be empty")

        _reject_remote_paths(text)

        expanded = Path(os.path.expanduser(text))
        return cls(text, expanded, _canonicalize(expanded))

    @classmethod
    def workspace(cls, text: str) -> SafePath:
        """Resolve a workspace path, which must be a writable directory."""
        safe = cls.from_user_input(text)
        safe.validate_writable()
        return safe

    @classmethod
    def project_root(cls, text: str) -> SafePath:
        """Resolve a project root, which must be an existing directory."""
        safe = cls.from_user_input(text)
        safe.validate_directory()
        return safe

    @property
    def original(self) -> str:
        return self._original

    @property
    def expanded(self) -> Path:
        return self._expanded

    @property
    def canonical(self) -> Path | None:
        return self._canonical

    def as_path(self) -> Path:
        """Best available representation: canonical if known, else expanded."""
        return self._canonical if self._canonical is not None else self._expanded

    def exists(self) -> bool:
        return self._expanded.exists()

    def refresh(self) -> SafePath:
        """Return a copy with canonical recomputed (e.g. after creating it)."""
        return SafePath(self._original, self._expanded, _canonicalize(self._expanded))

    def validate_directory(self) -> None:
        """Check that the path exists and is a directory.

        Raises:
            PathNotFoundError: If the path does not exist.
            NotADirectoryPathError: If the path is not a directory.

        """
        if not self.exists():
            raise PathNotFoundError(f"Path does not exist: {self._expanded}")
        if not self._expanded.is_dir():
            raise NotADirectoryPathError(f"Path is not a directory: {self._expanded}")

    def validate_writable(self) -> None:
        """Check that the path is a directory the current user can write to.

        Permission bits alone are not trusted: a probe file is written and
        removed to confirm.

        Raises:
            PathNotFoundError: If the path does not exist.
            NotADirectoryPathError: If the path is not a directory.
            PathNotWritableError: If permissions or the probe write fail.

        """
        self.validate_directory()

        mode = self._expanded.stat().st_mode
        if not IS_WINDOWS and (mode & stat.S_IRWXU) != stat.S_IRWXU:
            raise PathNotWritableError(
                f"Insufficient permissions on: {self._expanded} "
                f"(need owner rwx, current mode {stat.S_IMODE(mode):o})"
            )

        if not os.access(self._expanded, os.W_OK):
            raise PathNotWritableError(f"Directory is read-only: {self._expanded}")

        probe = self._expanded / WRITE_PROBE_NAME
        try:
            probe.write_bytes(b"test")
            probe.unlink()
        except OSError as e:
            raise PathNotWritableError(
                f"Cannot write to directory: {self._expanded} ({e})"
            ) from e

    def join(self, component: str) -> SafePath:
        """Join a single path component.

        Only plain names are accepted, so a join can never move outside
        this directory.

        Args:
            component: A single file or directory name.

        Returns:
            New SafePath for the joined location.

        Raises:
            PathTraversalError: If the component is empty, contains a
                separator or NUL byte, or is '.' or '..'.

        """
        if not component:
            raise PathTraversalError("Path component cannot be empty")
        if "/" in component or "\\" in component or "\0" in component:
            raise PathTraversalError(
                f"Path component cannot contain separators: '{component}'. "
                "Use multiple join() calls or resolve_path() for complex paths."
            )
        if component in (".", ".."):
            raise PathTraversalError(
                f"Path component cannot be '.' or '..': '{component}'. "
                "Use resolve_path() for relative paths."
            )

        joined = self._expanded / component
        return SafePath(f"{self._original}/{component}", joined, _canonicalize(joined))

    def equals(self, other: SafePath) -> bool:
        """Compare canonical forms when both exist, else expanded forms."""
        if self._canonical is not None and other._canonical is not None:
            return self._canonical == other._canonical
        return self._expanded == other._expanded

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SafePath):
            return NotImplemented
        return self.equals(other)

    # Equality may depend on symlink resolution, which no hash can follow.
    __hash__ = None  # type: ignore[assignment]

    def __fspath__(self) -> str:
        return str(self._expanded)

    def __str__(self) -> str:
        return str(self._expanded)

    def __repr__(self) -> str:
        return (
            f"SafePath(original={self._original!r}, expanded={str(self._expanded)!r}, "
            f"canonical={str(self._canonical) if self._canonical else None!r})"
        )


def resolve_path(text: str) -> SafePath:
    """Resolve user input into a SafePath. See SafePath.from_user_input."""
    return SafePath.from_user_input(text)
