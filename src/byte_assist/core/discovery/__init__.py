"""Project discovery for workspace roots.

Walks each root breadth-first, at most three levels deep and without
following symlinks, looking for ``byte.yaml`` manifests. Failures are
recorded per root and per manifest instead of aborting the scan.

Usage:
    from byte_assist.core.discovery import ProjectDiscovery
    from byte_assist.core.safe_path import resolve_path

    result = ProjectDiscovery().discover([resolve_path("~/projects")])
    for project in result.projects:
        print(project.name, project.path)
"""

from byte_assist.core.discovery.config import DiscoveryConfig
from byte_assist.core.discovery.service import (
    ProjectDiscovery,
    configured_roots,
    discover_projects,
)
from byte_assist.core.discovery.types import DiscoveredProject, DiscoveryResult, ScanFailure

__all__ = [
    "DiscoveredProject",
    "DiscoveryConfig",
    "DiscoveryResult",
    "ProjectDiscovery",
    "ScanFailure",
    "configured_roots",
    "discover_projects",
]
