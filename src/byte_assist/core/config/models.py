"""Global configuration models."""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE_PATH = "~/projects"


class WorkspaceConfig(BaseModel):
    """Workspace roots scanned for projects.

    Attributes:
        path: Primary workspace, where new projects are created.
        auto_scan: Whether the primary workspace is scanned on startup.
        registered: Additional directories to scan, stored as typed by the
            user (e.g. with a leading ``~``).

    """

    model_config = ConfigDict(frozen=True)

    path: str = DEFAULT_WORKSPACE_PATH
    auto_scan: bool = True
    registered: list[str] = Field(default_factory=list)

    @field_validator("registered", mode="before")
    @classmethod
    def coerce_none_to_empty_list(cls, v: Any) -> list[str]:
        """YAML parses empty keys (all items commented out) as None."""
        if v is None:
            return []
        return v


class ExecConfig(BaseModel):
    """Command execution settings.

    Attributes:
        allowed_programs: Replacement allow-list. None keeps the built-in
            list. Read once at startup; never changed while running.

    """

    model_config = ConfigDict(frozen=True)

    allowed_programs: list[str] | None = None


class ByteConfig(BaseModel):
    """Root of ~/.config/byte/config.yaml."""

    model_config = ConfigDict(frozen=True)

    workspace: WorkspaceConfig = Field(default_factory=WorkspaceConfig)
    exec: ExecConfig = Field(default_factory=ExecConfig)

    @field_validator("workspace", "exec", mode="before")
    @classmethod
    def coerce_none_to_default(cls, v: Any) -> Any:
        if v is None:
            return {}
        return v
