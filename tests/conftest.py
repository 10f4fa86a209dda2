"""Pytest configuration and fixtures for byte-assist tests."""

import logging
from pathlib import Path

import pytest
import yaml


@pytest.fixture(autouse=True)
def isolate_user_dirs(tmp_path_factory, monkeypatch):
    """Point config and log directories at temporary locations.

    Keeps tests from reading or writing ~/.config/byte and ~/.byte/logs.
    """
    base = tmp_path_factory.mktemp("user")
    monkeypatch.setenv("BYTE_CONFIG_DIR", str(base / "config"))
    monkeypatch.setenv("BYTE_LOG_DIR", str(base / "logs"))
    monkeypatch.delenv("EDITOR", raising=False)
    monkeypatch.delenv("VISUAL", raising=False)
    yield base


@pytest.fixture(autouse=True)
def reset_cli_logging():
    """Remove logging handlers installed by the CLI after each test."""
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_byte_handler", False):
            root.removeHandler(handler)
            handler.close()


def write_manifest(project_dir: Path, **overrides) -> Path:
    """Write a byte.yaml into project_dir (created if missing)."""
    data = {
        "name": project_dir.name,
        "type": "cli",
        "ecosystem": "rust",
    }
    data.update(overrides)
    project_dir.mkdir(parents=True, exist_ok=True)
    path = project_dir / "byte.yaml"
    path.write_text(yaml.safe_dump(data, sort_keys=False))
    return path


@pytest.fixture
def make_project():
    """Factory fixture creating a project directory with a manifest."""
    return write_manifest
