"""Git working-tree status for a project.

Runs ``git status --porcelain=v1 --branch`` through the command executor
and parses its text output. Example input:

    ## main...origin/main [ahead 2, behind 1]
    M  src/lib.rs
     M README.md
    ?? notes.txt

Parsing is defined entirely by this text format. A failed status query
yields a degraded record (repository, branch unknown, no changes) so the
dashboard always has something to show.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from byte_assist.core.exceptions import ExecutionError
from byte_assist.core.exec import CommandExecutor, CommandSpec

logger = logging.getLogger(__name__)

BRANCH_HEADER = "##"
UNTRACKED_MARKER = "?"
NO_COMMITS_PREFIXES = ("No commits yet on ", "Initial commit on ")
TRACKING_SEPARATOR = "..."

_AHEAD_RE = re.compile(r"\bahead (\d+)")
_BEHIND_RE = re.compile(r"\bbehind (\d+)")


@dataclass(frozen=True)
class GitStatus:
    """Snapshot of a repository's branch and change counts.

    Attributes:
        is_repo: False when the directory has no .git metadata.
        branch: Current branch, or None for detached HEAD / unknown.
        modified: Paths with unstaged (working tree) changes.
        staged: Paths with staged (index) changes.
        untracked: Untracked paths.
        ahead: Commits ahead of the upstream.
        behind: Commits behind the upstream.

    """

    is_repo: bool = True
    branch: str | None = None
    modified: int = 0
    staged: int = 0
    untracked: int = 0
    ahead: int = 0
    behind: int = 0

    def __post_init__(self) -> None:
        for name in ("modified", "staged", "untracked", "ahead", "behind"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

    @property
    def is_clean(self) -> bool:
        return self.modified == 0 and self.staged == 0 and self.untracked == 0

    @classmethod
    def not_a_repo(cls) -> GitStatus:
        return cls(is_repo=False)

    @classmethod
    def degraded(cls) -> GitStatus:
        """Status used when the query itself failed."""
        return cls(is_repo=True)


@dataclass
class _Counts:
    branch: str | None = None
    modified: int = 0
    staged: int = 0
    untracked: int = 0
    ahead: int = 0
    behind: int = 0


def _is_change_marker(ch: str) -> bool:
    return ch not in (" ", UNTRACKED_MARKER)


def _parse_branch_line(line: str, counts: _Counts) -> None:
    """Parse a ``## ...`` header into branch and ahead/behind counts."""
    header = line[len(BRANCH_HEADER):].strip()

    for prefix in NO_COMMITS_PREFIXES:
        if header.startswith(prefix):
            branch = header[len(prefix):].split(TRACKING_SEPARATOR, 1)[0].strip()
            counts.branch = branch or None
            return

    if "HEAD (no branch)" in header or header.startswith("HEAD detached"):
        counts.branch = None
        return

    if TRACKING_SEPARATOR in header:
        branch, rest = header.split(TRACKING_SEPARATOR, 1)
        counts.branch = branch or None

        start = rest.find("[")
        end = rest.find("]", start + 1)
        if start != -1 and end != -1:
            # ahead and behind are matched independently, so their order
            # inside the brackets does not matter
            tracking = rest[start + 1 : end]
            ahead = _AHEAD_RE.search(tracking)
            behind = _BEHIND_RE.search(tracking)
            if ahead:
                counts.ahead = int(ahead.group(1))
            if behind:
                counts.behind = int(behind.group(1))
        return

    # Local branch without upstream
    tokens = header.split()
    counts.branch = tokens[0] if tokens else None


def parse_git_status(output: str) -> GitStatus:
    """Parse ``git status --porcelain=v1 --branch`` output.

    Args:
        output: Raw stdout of the status command.

    Returns:
        GitStatus for a repository (is_repo is always True here).

    """
    counts = _Counts()

    for line in output.splitlines():
        if line.startswith(BRANCH_HEADER):
            _parse_branch_line(line, counts)
        elif line.startswith(UNTRACKED_MARKER * 2):
            counts.untracked += 1
        elif len(line) >= 2:
            # XY status code: X = index, Y = working tree
            if _is_change_marker(line[0]):
                counts.staged += 1
            if _is_change_marker(line[1]):
                counts.modified += 1

    return GitStatus(
        is_repo=True,
        branch=counts.branch,
        modified=counts.modified,
        staged=counts.staged,
        untracked=counts.untracked,
        ahead=counts.ahead,
        behind=counts.behind,
    )


def status_command(project_path: Path) -> CommandSpec:
    return CommandSpec.git("status", "--porcelain=v1", "--branch", working_dir=project_path)


def get_git_status(
    project_path: Path,
    executor: CommandExecutor | None = None,
    logger: logging.Logger | None = None,
) -> GitStatus:
    """Get git status for a project directory.

    Returns ``GitStatus.not_a_repo()`` without running anything when the
    directory has no ``.git`` entry, and ``GitStatus.degraded()`` when the
    status command cannot be run or exits non-zero.
    """
    log = logger or logging.getLogger(__name__)
    project_path = Path(project_path)

    # .git may be a directory or, for worktrees and submodules, a file
    if not (project_path / ".git").exists():
        return GitStatus.not_a_repo()

    executor = executor or CommandExecutor(logger=log)
    try:
        result = executor.execute(status_command(project_path))
    except ExecutionError as e:
        log.debug("git status failed for %s: %s", project_path, e)
        return GitStatus.degraded()

    if not result.success:
        log.debug(
            "git status exited %d for %s: %s",
            result.exit_code,
            project_path,
            result.stderr.strip(),
        )
        return GitStatus.degraded()

    return parse_git_status(result.stdout)
