"""Persisted build state (.byte/state/build.json).

The build state records the outcome of the most recent build task run in a
project. It is written by the task runner and read by the dashboard; a
project that has never been built simply has no state.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)

STATE_DIR = Path(".byte") / "state"
BUILD_STATE_FILE = "build.json"


class BuildStatus(StrEnum):
    """Outcome of a build task."""

    SUCCESS = "success"
    FAILED = "failed"
    RUNNING = "running"


class BuildState(BaseModel):
    """Last known build outcome for a project.

    Attributes:
        timestamp: Unix seconds when the state was recorded.
        status: Build outcome.
        task: Build task name (e.g. "release", "debug").

    """

    model_config = ConfigDict(frozen=True)

    timestamp: int
    status: BuildStatus
    task: str

    @classmethod
    def now(cls, status: BuildStatus, task: str) -> BuildState:
        return cls(timestamp=int(time.time()), status=status, task=task)


def build_state_path(project_path: Path) -> Path:
    return Path(project_path) / STATE_DIR / BUILD_STATE_FILE


def load_build_state(project_path: Path) -> BuildState | None:
    """Load the persisted build state.

    Returns:
        BuildState, or None if the project has no (readable, valid) state.

    """
    state_file = build_state_path(project_path)
    if not state_file.exists():
        return None

    try:
        data = json.loads(state_file.read_text(encoding="utf-8"))
        return BuildState.model_validate(data)
    except (OSError, json.JSONDecodeError, PydanticValidationError) as e:
        logger.warning("Ignoring unreadable build state %s: %s", state_file, e)
        return None


def save_build_state(project_path: Path, state: BuildState) -> Path:
    """Write build state atomically, creating .byte/state/ if needed.

    Returns:
        Path of the written state file.

    """
    state_file = build_state_path(project_path)
    state_file.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=state_file.parent, prefix=".build-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(state.model_dump(mode="json"), f, indent=2)
        os.replace(tmp_name, state_file)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.debug("Saved build state %s for task %s", state.status, state.task)
    return state_file
