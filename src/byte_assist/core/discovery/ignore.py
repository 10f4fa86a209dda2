"""Directory exclusion matching for discovery scans."""

import logging
from collections.abc import Iterable
from pathlib import PurePath

from pathspec import GitIgnoreSpec

from byte_assist.core.discovery.config import DEFAULT_EXCLUSIONS

logger = logging.getLogger(__name__)


class ExclusionMatcher:
    """Compiled gitignore-style patterns for directories a scan skips.

    Patterns are matched against paths relative to the scan root, so
    ``node_modules/`` excludes that directory at any depth.
    """

    spec: GitIgnoreSpec | None
    patterns: list[str]

    def __init__(self, patterns: Iterable[str] = DEFAULT_EXCLUSIONS) -> None:
        """Initialize with patterns.

        Args:
            patterns: Gitignore patterns; blank lines and comments are dropped.

        """
        self.patterns = [
            p.strip() for p in patterns if p.strip() and not p.strip().startswith("#")
        ]
        self.spec = GitIgnoreSpec.from_lines(self.patterns) if self.patterns else None

    def is_excluded(self, rel_path: PurePath, is_dir: bool = True) -> bool:
        """Check whether a path relative to the scan root is excluded.

        Args:
            rel_path: Path relative to the scan root.
            is_dir: True if the path is a directory.

        Returns:
            True if the path should not be scanned.

        """
        if self.spec is None:
            return False

        # pathspec expects forward slashes; directories need a trailing
        # slash so patterns like "target/" match the directory itself.
        path_str = rel_path.as_posix()
        if is_dir and self.spec.match_file(path_str + "/"):
            return True
        return self.spec.match_file(path_str)
