"""Tests for global configuration loading and editing."""

from pathlib import Path

import pytest
import yaml

from byte_assist.core.config import (
    ByteConfig,
    WorkspaceConfig,
    add_workspace_path,
    build_allowlist,
    get_config_path,
    load_config,
    remove_workspace_path,
    save_config,
)
from byte_assist.core.exceptions import ConfigError, PathNotFoundError, ValidationError
from byte_assist.core.exec import DEFAULT_ALLOWED_PROGRAMS


class TestConfigPath:
    """Tests for config location."""

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BYTE_CONFIG_DIR", str(tmp_path / "cfg"))

        assert get_config_path() == tmp_path / "cfg" / "config.yaml"


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "config.yaml")

        assert config == ByteConfig()
        assert config.workspace.path == "~/projects"
        assert config.workspace.auto_scan is True
        assert config.workspace.registered == []
        assert config.exec.allowed_programs is None

    def test_full_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(
            "workspace:\n"
            "  path: ~/code\n"
            "  auto_scan: false\n"
            "  registered:\n"
            "    - ~/work\n"
            "exec:\n"
            "  allowed_programs: [git, cargo]\n"
        )

        config = load_config(path)

        assert config.workspace.path == "~/code"
        assert config.workspace.auto_scan is False
        assert config.workspace.registered == ["~/work"]
        assert config.exec.allowed_programs == ["git", "cargo"]

    def test_empty_sections(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("workspace:\n  registered:\nexec:\n")

        config = load_config(path)

        assert config.workspace.registered == []
        assert config.exec.allowed_programs is None

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(path) == ByteConfig()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("workspace: [broken\n")

        with pytest.raises(ConfigError, match="Failed to parse"):
            load_config(path)

    def test_invalid_schema(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("workspace:\n  auto_scan: maybe-not\n")

        with pytest.raises(ConfigError, match="Invalid config"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- a\n")

        with pytest.raises(ConfigError, match="must be a mapping"):
            load_config(path)

    def test_default_location(self) -> None:
        save_config(ByteConfig(workspace=WorkspaceConfig(path="~/elsewhere")))

        assert load_config().workspace.path == "~/elsewhere"


class TestSaveConfig:
    """Tests for save_config."""

    def test_creates_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "config.yaml"

        save_config(ByteConfig(), path)

        data = yaml.safe_load(path.read_text())
        assert data["workspace"] == {"path": "~/projects", "auto_scan": True, "registered": []}
        assert "allowed_programs" not in (data.get("exec") or {})

    def test_save_then_load(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        config = ByteConfig.model_validate(
            {"workspace": {"registered": ["~/a"]}, "exec": {"allowed_programs": ["git"]}}
        )

        save_config(config, path)

        assert load_config(path) == config


class TestBuildAllowlist:
    """Tests for build_allowlist."""

    def test_defaults(self) -> None:
        assert build_allowlist(ByteConfig()).programs == DEFAULT_ALLOWED_PROGRAMS

    def test_override(self) -> None:
        config = ByteConfig.model_validate({"exec": {"allowed_programs": ["git", "make"]}})

        assert build_allowlist(config).programs == frozenset({"git", "make"})


class TestWorkspacePaths:
    """Tests for add/remove of registered workspace paths."""

    def test_add(self, tmp_path: Path) -> None:
        extra = tmp_path / "extra"
        extra.mkdir()
        config = ByteConfig(workspace=WorkspaceConfig(path=str(tmp_path / "ws")))

        updated = add_workspace_path(config, str(extra))

        assert updated.workspace.registered == [str(extra)]
        assert config.workspace.registered == []

    def test_add_stores_original_text(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "work").mkdir()

        updated = add_workspace_path(ByteConfig(), "~/work")

        assert updated.workspace.registered == ["~/work"]

    def test_add_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(PathNotFoundError):
            add_workspace_path(ByteConfig(), str(tmp_path / "missing"))

    def test_add_primary_workspace_rejected(self, tmp_path: Path) -> None:
        config = ByteConfig(workspace=WorkspaceConfig(path=str(tmp_path)))

        with pytest.raises(ValidationError, match="primary workspace") as exc_info:
            add_workspace_path(config, str(tmp_path) + "/")
        assert exc_info.value.rule == "duplicate"

    def test_add_duplicate_rejected(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "work").mkdir()
        config = ByteConfig(workspace=WorkspaceConfig(registered=["~/work"]))

        with pytest.raises(ValidationError, match="already registered"):
            add_workspace_path(config, str(tmp_path / "work"))

    def test_remove(self, tmp_path: Path) -> None:
        config = ByteConfig(
            workspace=WorkspaceConfig(registered=[str(tmp_path / "a"), str(tmp_path / "b")])
        )

        updated = remove_workspace_path(config, str(tmp_path / "a"))

        assert updated.workspace.registered == [str(tmp_path / "b")]

    def test_remove_matches_equivalent_spelling(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "work").mkdir()
        config = ByteConfig(workspace=WorkspaceConfig(registered=["~/work"]))

        updated = remove_workspace_path(config, str(tmp_path / "work"))

        assert updated.workspace.registered == []

    def test_remove_unknown(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            remove_workspace_path(ByteConfig(), str(tmp_path))
