"""Load, save and edit the global configuration file.

Location (XDG style): ``~/.config/byte/config.yaml``. The directory can be
overridden with the ``BYTE_CONFIG_DIR`` environment variable.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from byte_assist.core.config.models import ByteConfig
from byte_assist.core.exceptions import ConfigError, ValidationError
from byte_assist.core.exec import AllowList
from byte_assist.core.safe_path import SafePath, resolve_path

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "BYTE_CONFIG_DIR"
DEFAULT_CONFIG_DIR = Path.home() / ".config" / "byte"
CONFIG_FILENAME = "config.yaml"


def get_config_dir() -> Path:
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_DIR


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILENAME


def load_config(path: Path | None = None) -> ByteConfig:
    """Load the global config, returning defaults if the file is missing.

    Raises:
        ConfigError: If the file exists but is unreadable, not valid YAML,
            or does not match the schema.

    """
    config_path = path or get_config_path()
    if not config_path.exists():
        logger.debug("No config at %s, using defaults", config_path)
        return ByteConfig()

    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse config YAML {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping")

    try:
        config = ByteConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e

    logger.debug(
        "Loaded config: workspace=%s, registered=%d",
        config.workspace.path,
        len(config.workspace.registered),
    )
    return config


def save_config(config: ByteConfig, path: Path | None = None) -> Path:
    """Persist the global config, creating its directory.

    Raises:
        ConfigError: If the file cannot be written.

    """
    config_path = path or get_config_path()
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(
                config.model_dump(mode="json", exclude_none=True),
                f,
                default_flow_style=False,
                sort_keys=False,
            )
    except OSError as e:
        raise ConfigError(f"Failed to save config to {config_path}: {e}") from e

    logger.debug("Saved config to %s", config_path)
    return config_path


def build_allowlist(config: ByteConfig) -> AllowList:
    """Allow-list for this process, from config or the built-in defaults."""
    return AllowList.from_names(config.exec.allowed_programs)


def add_workspace_path(config: ByteConfig, text: str) -> ByteConfig:
    """Register an additional workspace directory.

    The path is stored as typed so ``~`` stays portable.

    Returns:
        A new config with the path appended.

    Raises:
        ValidationError: If the path is invalid, missing, not a directory,
            the primary workspace, or already registered.

    """
    candidate = resolve_path(text)
    candidate.validate_directory()

    if candidate == resolve_path(config.workspace.path):
        raise ValidationError("Path is already the primary workspace", rule="duplicate")

    for registered in config.workspace.registered:
        if _same_path(candidate, registered):
            raise ValidationError("Path is already registered", rule="duplicate")

    workspace = config.workspace.model_copy(
        update={"registered": [*config.workspace.registered, text]}
    )
    return config.model_copy(update={"workspace": workspace})


def remove_workspace_path(config: ByteConfig, text: str) -> ByteConfig:
    """Unregister a workspace directory.

    Raises:
        ConfigError: If the path is not registered.

    """
    target = resolve_path(text)
    remaining = [r for r in config.workspace.registered if not _same_path(target, r)]

    if len(remaining) == len(config.workspace.registered):
        raise ConfigError(f"Path not found in registered workspaces: {text}")

    workspace = config.workspace.model_copy(update={"registered": remaining})
    return config.model_copy(update={"workspace": workspace})


def _same_path(candidate: SafePath, text: str) -> bool:
    try:
        return candidate == resolve_path(text)
    except ValidationError:
        return False
