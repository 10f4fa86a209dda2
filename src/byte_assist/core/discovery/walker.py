"""Manifest walker for project discovery using iterative BFS."""

import logging
import os
from collections import deque
from collections.abc import Generator
from pathlib import Path
from typing import Protocol

from byte_assist.core.discovery.config import DiscoveryConfig
from byte_assist.core.discovery.ignore import ExclusionMatcher
from byte_assist.core.discovery.types import ManifestEntry, ScanFailure

logger = logging.getLogger(__name__)


class FilesystemInterface(Protocol):
    """Protocol for filesystem operations to enable dependency injection."""

    def scandir(self, path: Path) -> list[os.DirEntry[str]]:
        """List a directory.

        Args:
            path: Directory path to scan

        Returns:
            DirEntry objects for each entry in the directory

        Raises:
            OSError: If the directory cannot be read

        """
        ...


class RealFilesystem:
    """Real filesystem implementation using os module."""

    def scandir(self, path: Path) -> list[os.DirEntry[str]]:
        with os.scandir(path) as it:
            return list(it)


class ManifestWalker:
    """Iterative BFS walker that finds manifest files under one root.

    Uses iterative BFS (not recursion) and never descends through symlinks,
    so deep or cyclic trees cannot cause unbounded scans. Unreadable
    directories are recorded in ``failures`` and skipped.
    """

    def __init__(
        self,
        root: Path,
        config: DiscoveryConfig,
        exclusions: ExclusionMatcher | None = None,
        filesystem: FilesystemInterface | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the walker.

        Args:
            root: Directory to scan
            config: Discovery configuration
            exclusions: Directory exclusion matcher (defaults from config)
            filesystem: Optional filesystem implementation for testing
            logger: Logger for scan diagnostics

        """
        self.root = root
        self.config = config
        self.exclusions = exclusions if exclusions is not None else ExclusionMatcher(config.exclusions)
        self.filesystem = filesystem if filesystem is not None else RealFilesystem()
        self.logger = logger or logging.getLogger(__name__)
        self.failures: list[ScanFailure] = []
        self.entries_scanned = 0

    def walk(self) -> Generator[ManifestEntry, None, None]:
        """Walk the tree and yield manifest files, shallowest first.

        Yields:
            ManifestEntry for every manifest at depth <= config.max_depth

        """
        # Track visited real paths; only matters if a filesystem double
        # reports a directory.
        visited: set[Path] = set()

        # BFS queue: (directory, depth of the directory itself)
        queue: deque[tuple[Path, int]] = deque()
        queue.append((self.root, 0))

        while queue:
            dir_path, depth = queue.popleft()

            try:
                real_path = dir_path.resolve()
            except (OSError, RuntimeError) as e:
                self._record(dir_path, f"Cannot resolve path: {e}")
                continue

            if real_path in visited:
                continue
            visited.add(real_path)

            try:
                entries = self.filesystem.scandir(dir_path)
            except OSError as e:
                self._record(dir_path, f"Cannot scan directory: {e}")
                continue

            entry_depth = depth + 1
            subdirs: list[Path] = []
            for entry in sorted(entries, key=lambda e: e.name):
                self.entries_scanned += 1
                try:
                    is_dir = entry.is_dir(follow_symlinks=self.config.follow_symlinks)
                except OSError as e:
                    self.logger.debug("Error processing entry %s: %s", entry.path, e)
                    continue

                entry_path = Path(entry.path)

                if is_dir:
                    # Contents of this directory sit one level deeper still
                    if entry_depth >= self.config.max_depth:
                        continue
                    rel_path = entry_path.relative_to(self.root)
                    if self.exclusions.is_excluded(rel_path, is_dir=True):
                        continue
                    subdirs.append(entry_path)
                elif entry.name == self.config.manifest_name:
                    self.logger.debug("Found manifest at: %s", entry_path)
                    yield ManifestEntry(path=entry_path, depth=entry_depth)

            for subdir in subdirs:
                queue.append((subdir, entry_depth))

    def _record(self, path: Path, reason: str) -> None:
        self.logger.warning("%s (%s)", reason, path)
        self.failures.append(ScanFailure(path=path, reason=reason))
