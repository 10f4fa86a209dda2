"""Configuration for project discovery."""

from dataclasses import dataclass, field

from byte_assist.core.manifest import MANIFEST_FILENAME

# Directories never searched for manifests. Every entry must be a name that
# check_project_name rejects.
DEFAULT_EXCLUSIONS: tuple[str, ...] = (
    ".git/",
    ".hg/",
    ".svn/",
    ".byte/",
    ".venv/",
    "node_modules/",
    "target/",
)


@dataclass(frozen=True)
class DiscoveryConfig:
    """Runtime configuration for a discovery scan.

    Attributes:
        manifest_name: File name that marks a project root.
        max_depth: Deepest entry inspected, counted from the scan root
            (root = 0, so root/a/b/byte.yaml is at depth 3).
        follow_symlinks: Whether to follow symlinks (always False: deep or
            cyclic workspaces must not cause unbounded scans).
        exclusions: Gitignore-style directory patterns to skip.

    """

    manifest_name: str = MANIFEST_FILENAME
    max_depth: int = 3
    follow_symlinks: bool = False
    exclusions: tuple[str, ...] = field(default=DEFAULT_EXCLUSIONS)
