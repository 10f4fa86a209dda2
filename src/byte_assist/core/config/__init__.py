"""Global configuration for byte-assist.

Usage:
    from byte_assist.core.config import load_config

    config = load_config()
    print(config.workspace.path)
"""

from byte_assist.core.config.loader import (
    CONFIG_DIR_ENV,
    add_workspace_path,
    build_allowlist,
    get_config_dir,
    get_config_path,
    load_config,
    remove_workspace_path,
    save_config,
)
from byte_assist.core.config.models import ByteConfig, ExecConfig, WorkspaceConfig

__all__ = [
    "CONFIG_DIR_ENV",
    "ByteConfig",
    "ExecConfig",
    "WorkspaceConfig",
    "add_workspace_path",
    "build_allowlist",
    "get_config_dir",
    "get_config_path",
    "load_config",
    "remove_workspace_path",
    "save_config",
]
