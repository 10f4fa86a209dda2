"""Project manifest (byte.yaml) model and persistence.

Every project managed by byte-assist has a ``byte.yaml`` at its root:

    name: my-app
    type: cli
    ecosystem: rust
    description: Optional one-liner
    build:
      release: cargo build --release
    commands:
      lint: cargo clippy && cargo fmt --check

``build`` and ``commands`` hold shell command lines. They are only ever
executed as TrustedShellText read back from this file.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Protocol

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from byte_assist.core.exceptions import ManifestError, ProjectNameError
from byte_assist.core.project_name import validate_project_name

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "byte.yaml"


class ProjectManifest(BaseModel):
    """Parsed contents of a project's byte.yaml."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    name: str
    project_type: str = Field(alias="type")
    ecosystem: str
    description: str | None = None
    build: dict[str, str] = Field(default_factory=dict)
    commands: dict[str, str] = Field(default_factory=dict)

    @field_validator("build", "commands", mode="before")
    @classmethod
    def coerce_none_to_empty_dict(cls, v: Any) -> dict[str, str]:
        """YAML parses an empty table (all entries commented out) as None."""
        if v is None:
            return {}
        return v

    @field_validator("name", "project_type", "ecosystem")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    def to_yaml_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.project_type,
            "ecosystem": self.ecosystem,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.build:
            data["build"] = dict(self.build)
        if self.commands:
            data["commands"] = dict(self.commands)
        return data


class ManifestRule(Protocol):
    """A pluggable check applied to a loaded manifest."""

    def validate(self, manifest: ProjectManifest) -> None:
        """Raise ManifestError if the manifest violates this rule."""
        ...


class ProjectNameRule:
    """Manifest name must be a valid project name."""

    def validate(self, manifest: ProjectManifest) -> None:
        try:
            validate_project_name(manifest.name)
        except ProjectNameError as e:
            raise ManifestError(f"Invalid project name in manifest: {e}") from e


class KnownEcosystemRule:
    """Manifest ecosystem must be one of a fixed set."""

    def __init__(self, ecosystems: Iterable[str]) -> None:
        self.ecosystems = frozenset(ecosystems)

    def validate(self, manifest: ProjectManifest) -> None:
        if manifest.ecosystem not in self.ecosystems:
            raise ManifestError(
                f"Unknown ecosystem '{manifest.ecosystem}' "
                f"(expected one of: {', '.join(sorted(self.ecosystems))})"
            )


def validate_manifest(manifest: ProjectManifest, rules: Iterable[ManifestRule]) -> None:
    """Apply rules in order; the first failure propagates."""
    for rule in rules:
        rule.validate(manifest)


def manifest_path(project_dir: Path) -> Path:
    return project_dir / MANIFEST_FILENAME


def load_manifest(project_dir: Path) -> ProjectManifest:
    """Load byte.yaml from a project directory.

    Raises:
        ManifestError: If the file is missing, unreadable, not UTF-8, not
            YAML, or does not match the schema.

    """
    path = manifest_path(project_dir)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}", path=path) from e

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in {path}: {e}", path=path) from e

    if not isinstance(data, dict):
        raise ManifestError(f"Manifest {path} must be a mapping", path=path)

    try:
        return ProjectManifest.model_validate(data)
    except PydanticValidationError as e:
        raise ManifestError(f"Invalid manifest {path}: {e}", path=path) from e


def save_manifest(project_dir: Path, manifest: ProjectManifest) -> Path:
    """Write byte.yaml atomically (temp file + rename).

    Returns:
        Path of the written manifest.

    """
    path = manifest_path(project_dir)
    fd, tmp_name = tempfile.mkstemp(dir=project_dir, prefix=".byte-", suffix=".yaml.tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            yaml.safe_dump(manifest.to_yaml_dict(), f, default_flow_style=False, sort_keys=False)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Saved manifest %s", path)
    return path
