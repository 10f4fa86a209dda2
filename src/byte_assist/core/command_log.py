"""Per-project logs of executed commands.

Each task run leaves a plain-text log under
``.byte/logs/commands/<category>/<YYYY-MM-DD-HHMMSS>-<name>.log`` with the
command, exit code, working directory and captured output. Only the newest
MAX_LOGS_PER_CATEGORY logs are kept per category.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from byte_assist.core.exec import ExecutionResult

logger = logging.getLogger(__name__)

COMMAND_LOGS_DIR = Path(".byte") / "logs" / "commands"
MAX_LOGS_PER_CATEGORY = 20
LOG_SUFFIX = ".log"

_NAME_CHARS_RE = re.compile(r"[^A-Za-z0-9-]")


@dataclass(frozen=True)
class CommandLog:
    """A command log file on disk."""

    path: Path
    category: str
    modified: float

    @property
    def filename(self) -> str:
        return self.path.name


def command_log_dir(project_root: Path, category: str) -> Path:
    return Path(project_root) / COMMAND_LOGS_DIR / category


def extract_command_name(command: str) -> str:
    """Short filename-safe name for a command line.

    Uses the second word when there is one ("cargo build" -> "build"),
    otherwise the first, keeping only letters, digits and dashes.
    """
    parts = command.split()
    if not parts:
        return "cmd"
    word = parts[1] if len(parts) >= 2 else parts[0]
    return _NAME_CHARS_RE.sub("", word) or "cmd"


def _format_log(command: str, project_root: Path, result: ExecutionResult) -> str:
    return (
        f"Command: {command}\n"
        f"Timestamp: {result.timestamp.astimezone().strftime('%Y-%m-%d %H:%M:%S')}\n"
        f"Exit Code: {result.exit_code}\n"
        f"Duration: {result.duration.total_seconds():.2f}s\n"
        f"Working Directory: {project_root}\n"
        "\n--- STDOUT ---\n"
        f"{result.stdout}"
        "\n--- STDERR ---\n"
        f"{result.stderr}"
    )


def write_command_log(
    project_root: Path,
    category: str,
    command: str,
    result: ExecutionResult,
) -> Path:
    """Write a command log atomically and prune old logs in its category.

    Args:
        project_root: Project directory.
        category: Log category (git, test, lint, build, other).
        command: Command line as displayed to the user.
        result: Outcome of the command.

    Returns:
        Path of the written log file.

    """
    log_dir = command_log_dir(project_root, category)
    log_dir.mkdir(parents=True, exist_ok=True)

    stamp = result.timestamp.astimezone().strftime("%Y-%m-%d-%H%M%S")
    log_file = log_dir / f"{stamp}-{extract_command_name(command)}{LOG_SUFFIX}"

    fd, tmp_name = tempfile.mkstemp(dir=log_dir, prefix=".log-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(_format_log(command, Path(project_root), result))
        os.replace(tmp_name, log_file)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    removed = cleanup_old_logs(project_root, category)
    logger.debug("Wrote command log %s (pruned %d)", log_file, removed)
    return log_file


def _list_logs(project_root: Path, category: str) -> list[CommandLog]:
    log_dir = command_log_dir(project_root, category)
    if not log_dir.is_dir():
        return []

    logs = []
    for path in log_dir.iterdir():
        if path.suffix != LOG_SUFFIX or not path.is_file():
            continue
        try:
            modified = path.stat().st_mtime
        except OSError:
            continue
        logs.append(CommandLog(path=path, category=category, modified=modified))
    # Newest first; the timestamped filename breaks mtime ties
    logs.sort(key=lambda log: (log.modified, log.filename), reverse=True)
    return logs


def cleanup_old_logs(
    project_root: Path, category: str, keep: int = MAX_LOGS_PER_CATEGORY
) -> int:
    """Delete all but the newest ``keep`` logs in a category.

    Returns:
        Number of files removed.

    """
    removed = 0
    for log in _list_logs(project_root, category)[keep:]:
        try:
            log.path.unlink()
            removed += 1
        except OSError as e:
            logger.warning("Failed to remove old log %s: %s", log.path, e)
    return removed


def recent_logs(
    project_root: Path,
    category: str | None = None,
    limit: int = MAX_LOGS_PER_CATEGORY,
) -> list[CommandLog]:
    """Most recent command logs, newest first.

    Args:
        project_root: Project directory.
        category: Restrict to one category, or None for all of them.
        limit: Maximum number of logs returned.

    """
    if category is not None:
        return _list_logs(project_root, category)[:limit]

    base = Path(project_root) / COMMAND_LOGS_DIR
    if not base.is_dir():
        return []

    logs: list[CommandLog] = []
    for entry in sorted(base.iterdir()):
        if entry.is_dir():
            logs.extend(_list_logs(project_root, entry.name))
    logs.sort(key=lambda log: (log.modified, log.filename), reverse=True)
    return logs[:limit]


def format_log_time(log: CommandLog) -> str:
    return datetime.fromtimestamp(log.modified).strftime("%Y-%m-%d %H:%M:%S")
