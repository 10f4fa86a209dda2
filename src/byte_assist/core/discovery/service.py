"""High-level service for project discovery."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from byte_assist.core.discovery.config import DiscoveryConfig
from byte_assist.core.discovery.ignore import ExclusionMatcher
from byte_assist.core.discovery.types import DiscoveredProject, DiscoveryResult, ScanFailure
from byte_assist.core.discovery.walker import FilesystemInterface, ManifestWalker
from byte_assist.core.exceptions import ManifestError, ValidationError
from byte_assist.core.manifest import ManifestRule, ProjectNameRule, load_manifest, validate_manifest
from byte_assist.core.safe_path import SafePath, resolve_path

if TYPE_CHECKING:
    from byte_assist.core.config.models import ByteConfig

logger = logging.getLogger(__name__)


class ProjectDiscovery:
    """Scans workspace roots for project manifests.

    A scan never raises: a missing root, an unreadable directory or a
    malformed manifest is recorded as a ScanFailure and the scan moves on,
    so one bad registration cannot blank the whole project list.

    Loaded manifests are checked with ``rules``; by default the manifest
    name must be a valid project name.
    """

    def __init__(
        self,
        config: DiscoveryConfig | None = None,
        filesystem: FilesystemInterface | None = None,
        logger: logging.Logger | None = None,
        rules: Sequence[ManifestRule] | None = None,
    ) -> None:
        self.config = config or DiscoveryConfig()
        self.rules: Sequence[ManifestRule] = rules if rules is not None else (ProjectNameRule(),)
        self.filesystem = filesystem
        self.logger = logger or logging.getLogger(__name__)
        self._exclusions = ExclusionMatcher(self.config.exclusions)

    def discover(self, roots: Iterable[SafePath]) -> DiscoveryResult:
        """Scan each root in turn and collect projects.

        Args:
            roots: Validated root directories.

        Returns:
            DiscoveryResult with projects (each reported once, even when
            roots overlap) and per-root/per-manifest failures.

        """
        result = DiscoveryResult()
        seen: set[Path] = set()

        for root in roots:
            self.logger.info("Scanning root: %s", root)
            before = len(result.projects)
            self._scan_root(root, result, seen)
            self.logger.info(
                "Found %d projects in %s", len(result.projects) - before, root
            )

        self.logger.info(
            "Total projects discovered: %d (%d failures)",
            len(result.projects),
            len(result.failures),
        )
        return result

    def _scan_root(self, root: SafePath, result: DiscoveryResult, seen: set[Path]) -> None:
        try:
            root.validate_directory()
        except ValidationError as e:
            self.logger.warning("Skipping root %s: %s", root, e)
            result.failures.append(ScanFailure(path=root.expanded, reason=str(e)))
            return

        walker = ManifestWalker(
            root.as_path(),
            self.config,
            exclusions=self._exclusions,
            filesystem=self.filesystem,
            logger=self.logger,
        )
        for entry in walker.walk():
            project_dir = entry.path.parent
            key = project_dir.resolve()
            if key in seen:
                continue
            try:
                manifest = load_manifest(project_dir)
                validate_manifest(manifest, self.rules)
            except ManifestError as e:
                self.logger.warning("Failed to load project from %s: %s", project_dir, e)
                result.failures.append(ScanFailure(path=entry.path, reason=str(e)))
                continue

            seen.add(key)
            self.logger.debug("Loaded project: %s", manifest.name)
            result.projects.append(DiscoveredProject(path=project_dir.absolute(), manifest=manifest))

        result.failures.extend(walker.failures)
        self.logger.debug("Scanned %d entries under %s", walker.entries_scanned, root)


def configured_roots(config: ByteConfig) -> tuple[list[SafePath], list[ScanFailure]]:
    """Resolve the workspace (if auto-scanned) and registered paths.

    Returns:
        Tuple of (resolved roots, failures for entries that did not resolve).

    """
    texts: list[str] = []
    if config.workspace.auto_scan:
        texts.append(config.workspace.path)
    texts.extend(config.workspace.registered)

    roots: list[SafePath] = []
    failures: list[ScanFailure] = []
    for text in texts:
        try:
            roots.append(resolve_path(text))
        except ValidationError as e:
            logger.warning("Invalid workspace path %r: %s", text, e)
            failures.append(ScanFailure(path=Path(text.strip() or "."), reason=str(e)))
    return roots, failures


def discover_projects(
    config: ByteConfig,
    discovery: ProjectDiscovery | None = None,
) -> DiscoveryResult:
    """Discover projects in every configured workspace root."""
    roots, failures = configured_roots(config)
    result = (discovery or ProjectDiscovery()).discover(roots)
    result.failures[:0] = failures
    return result
