"""Allow-list of external programs the executor may spawn."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

DEFAULT_ALLOWED_PROGRAMS: frozenset[str] = frozenset(
    {
        # Rust
        "cargo",
        "rustc",
        "rustfmt",
        "clippy-driver",
        # Go
        "go",
        "gofmt",
        # JavaScript / TypeScript
        "bun",
        "npm",
        "node",
        "npx",
        # Version control
        "git",
        # Build tools
        "make",
        "cmake",
        # Python
        "python",
        "python3",
        # Shell mode only (see CommandSpec.shell)
        "sh",
        "bash",
        # Command existence checks
        "which",
        # Interactive editors
        "vim",
        "nano",
        "vi",
        "emacs",
    }
)

SHELL_PROGRAMS: frozenset[str] = frozenset({"sh", "bash"})


@dataclass(frozen=True)
class AllowList:
    """Immutable set of permitted program names.

    Built once at process start (from defaults or the global config) and
    handed to the executor. Matching is exact: no path lookup, no case
    folding.
    """

    programs: frozenset[str] = DEFAULT_ALLOWED_PROGRAMS

    def __post_init__(self) -> None:
        if not isinstance(self.programs, frozenset):
            object.__setattr__(self, "programs", frozenset(self.programs))

    @classmethod
    def from_names(cls, names: Iterable[str] | None) -> AllowList:
        """Build an allow-list, falling back to the defaults when names is None."""
        if names is None:
            return cls()
        return cls(frozenset(name.strip() for name in names if name.strip()))

    def contains(self, program: str) -> bool:
        return program in self.programs

    def __contains__(self, program: object) -> bool:
        return program in self.programs

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.programs))

    def __len__(self) -> int:
        return len(self.programs)
