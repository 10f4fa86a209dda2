"""Gitignore setup for byte-assist project metadata.

Logs and build state under ``.byte/`` are machine-local and must never be
committed. These helpers make sure a project's .gitignore excludes them.
"""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

GITIGNORE_HEADER = "# byte-assist metadata (logs, build state)"

GITIGNORE_PATTERNS: tuple[str, ...] = (".byte/",)


def _existing_patterns(gitignore: Path) -> set[str]:
    if not gitignore.exists():
        return set()
    lines = gitignore.read_text(encoding="utf-8").splitlines()
    return {line.strip() for line in lines if line.strip() and not line.startswith("#")}


def check_gitignore(project_path: Path) -> tuple[bool, list[str]]:
    """Check whether .gitignore excludes byte-assist metadata.

    Returns:
        Tuple of (all patterns present, missing patterns).

    """
    present = _existing_patterns(project_path / ".gitignore")
    missing = [p for p in GITIGNORE_PATTERNS if p not in present]
    return not missing, missing


def setup_gitignore(project_path: Path, dry_run: bool = False) -> tuple[bool, str]:
    """Add missing patterns to .gitignore, creating it if needed.

    Args:
        project_path: Project root.
        dry_run: Report what would change without writing.

    Returns:
        Tuple of (changed, human-readable message). With dry_run, changed
        reports whether a write would have happened.

    """
    gitignore = project_path / ".gitignore"
    all_present, missing = check_gitignore(project_path)
    if all_present:
        return False, ".gitignore already excludes byte-assist metadata"

    block = "\n".join([GITIGNORE_HEADER, *missing]) + "\n"
    exists = gitignore.exists()

    if dry_run:
        action = "append to" if exists else "create"
        return True, f"Would {action} .gitignore: {', '.join(missing)}"

    if exists:
        content = gitignore.read_text(encoding="utf-8")
        if content and not content.endswith("\n"):
            content += "\n"
        separator = "\n" if content else ""
        gitignore.write_text(content + separator + block, encoding="utf-8")
        message = f"Updated .gitignore: {', '.join(missing)}"
    else:
        gitignore.write_text(block, encoding="utf-8")
        message = f"Created .gitignore: {', '.join(missing)}"

    logger.debug("%s (%s)", message, gitignore)
    return True, message


def ensure_gitignore(project_path: Path) -> None:
    """Silently make sure .gitignore excludes byte-assist metadata."""
    changed, message = setup_gitignore(project_path)
    if changed:
        logger.info(message)
