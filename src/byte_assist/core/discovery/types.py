"""Shared types for the discovery module."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import NamedTuple

from byte_assist.core.manifest import ProjectManifest


class ManifestEntry(NamedTuple):
    """A manifest file found during a walk.

    Attributes:
        path: Full path to the manifest file
        depth: Depth of the file below the scan root (root = 0)

    """

    path: Path
    depth: int


@dataclass(frozen=True)
class DiscoveredProject:
    """A project root paired with its parsed manifest."""

    path: Path
    manifest: ProjectManifest

    @property
    def name(self) -> str:
        return self.manifest.name

    @property
    def ecosystem(self) -> str:
        return self.manifest.ecosystem

    @property
    def project_type(self) -> str:
        return self.manifest.project_type

    @property
    def description(self) -> str:
        """Manifest description, or '<type> project' when absent."""
        return self.manifest.description or f"{self.manifest.project_type} project"


@dataclass(frozen=True)
class ScanFailure:
    """A root or manifest that could not be scanned. Recorded, never raised."""

    path: Path
    reason: str


@dataclass
class DiscoveryResult:
    """Projects found by a scan plus every partial failure."""

    projects: list[DiscoveredProject] = field(default_factory=list)
    failures: list[ScanFailure] = field(default_factory=list)

    def __iter__(self) -> Iterator[DiscoveredProject]:
        return iter(self.projects)

    def __len__(self) -> int:
        return len(self.projects)
