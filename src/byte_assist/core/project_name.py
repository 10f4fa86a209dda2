"""Project name validation.

This is the only gate before a project directory is created on disk. Rules
are checked in a fixed order and the first violation is reported with its
own NameRule so callers can tell the user exactly what to fix.
"""

from __future__ import annotations

from enum import StrEnum

from byte_assist.core.exceptions import ProjectNameError

MAX_NAME_BYTES = 255

# Filesystem, VCS and IDE directory names plus Windows device names.
RESERVED_NAMES: frozenset[str] = frozenset(
    {
        ".",
        "..",
        ".git",
        ".svn",
        ".hg",
        ".byte",
        ".idea",
        ".vscode",
        "node_modules",
        "target",
        "con",
        "prn",
        "aux",
        "nul",
        *(f"com{i}" for i in range(1, 10)),
        *(f"lpt{i}" for i in range(1, 10)),
    }
)

_ALLOWED_PUNCTUATION = frozenset("-_.")


class NameRule(StrEnum):
    """Naming rules, in the order they are checked."""

    EMPTY = "empty"
    PATH_SEPARATOR = "path_separator"
    NULL_BYTE = "null_byte"
    RESERVED = "reserved"
    TOO_LONG = "too_long"
    INVALID_CHARACTER = "invalid_character"
    LEADING_DOT = "leading_dot"
    LEADING_DASH = "leading_dash"
    TRAILING_DOT = "trailing_dot"


def _is_allowed_char(ch: str) -> bool:
    return (ch.isascii() and ch.isalnum()) or ch in _ALLOWED_PUNCTUATION


def check_project_name(name: str) -> tuple[NameRule, str] | None:
    """Return the first violated rule and a message, or None if valid."""
    if not name.strip():
        return NameRule.EMPTY, "Project name cannot be empty"

    if "/" in name or "\\" in name:
        return NameRule.PATH_SEPARATOR, "Project name cannot contain path separators"

    if "\0" in name:
        return NameRule.NULL_BYTE, "Project name cannot contain null bytes"

    if name.lower() in RESERVED_NAMES:
        return NameRule.RESERVED, f"'{name}' is a reserved name"

    if len(name.encode("utf-8")) > MAX_NAME_BYTES:
        return NameRule.TOO_LONG, f"Project name is too long (max {MAX_NAME_BYTES} bytes)"

    for ch in name:
        if not _is_allowed_char(ch):
            return (
                NameRule.INVALID_CHARACTER,
                f"Project name contains invalid character {ch!r} "
                "(only letters, digits, '-', '_' and '.' are allowed)",
            )

    if name.startswith("."):
        return NameRule.LEADING_DOT, "Project name cannot start with '.'"

    if name.startswith("-"):
        return NameRule.LEADING_DASH, "Project name cannot start with '-'"

    if name.endswith("."):
        return NameRule.TRAILING_DOT, "Project name cannot end with '.'"

    return None


def validate_project_name(name: str) -> None:
    """Validate a candidate project name.

    Raises:
        ProjectNameError: With ``rule`` set to the first violated NameRule.

    """
    violation = check_project_name(name)
    if violation is not None:
        rule, message = violation
        raise ProjectNameError(message, rule=rule, name=name)


def is_valid_project_name(name: str) -> bool:
    return check_project_name(name) is None
