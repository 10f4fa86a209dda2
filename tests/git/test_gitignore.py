"""Tests for gitignore setup utilities."""

from pathlib import Path

from byte_assist.git.gitignore import (
    check_gitignore,
    ensure_gitignore,
    setup_gitignore,
)


class TestCheckGitignore:
    """Tests for check_gitignore function."""

    def test_no_gitignore_returns_all_missing(self, tmp_path: Path) -> None:
        all_present, missing = check_gitignore(tmp_path)

        assert all_present is False
        assert missing == [".byte/"]

    def test_pattern_present(self, tmp_path: Path) -> None:
        (tmp_path / ".gitignore").write_text("target/\n.byte/\n")

        assert check_gitignore(tmp_path) == (True, [])

    def test_commented_pattern_does_not_count(self, tmp_path: Path) -> None:
        (tmp_path / ".gitignore").write_text("# .byte/\n")

        all_present, _ = check_gitignore(tmp_path)

        assert all_present is False


class TestSetupGitignore:
    """Tests for setup_gitignore function."""

    def test_creates_gitignore_if_missing(self, tmp_path: Path) -> None:
        changed, message = setup_gitignore(tmp_path)

        assert changed is True
        assert "Created" in message
        assert ".byte/" in (tmp_path / ".gitignore").read_text().splitlines()

    def test_appends_to_existing_gitignore(self, tmp_path: Path) -> None:
        gitignore = tmp_path / ".gitignore"
        gitignore.write_text("/target")

        changed, message = setup_gitignore(tmp_path)

        assert changed is True
        assert "Updated" in message
        lines = gitignore.read_text().splitlines()
        assert lines[0] == "/target"
        assert ".byte/" in lines

    def test_idempotent(self, tmp_path: Path) -> None:
        setup_gitignore(tmp_path)
        before = (tmp_path / ".gitignore").read_text()

        changed, message = setup_gitignore(tmp_path)

        assert changed is False
        assert "already" in message.lower()
        assert (tmp_path / ".gitignore").read_text() == before

    def test_dry_run_does_not_modify(self, tmp_path: Path) -> None:
        changed, message = setup_gitignore(tmp_path, dry_run=True)

        assert changed is True
        assert "Would" in message
        assert not (tmp_path / ".gitignore").exists()


class TestEnsureGitignore:
    """Tests for ensure_gitignore function."""

    def test_auto_creates_gitignore(self, tmp_path: Path) -> None:
        ensure_gitignore(tmp_path)

        assert ".byte/" in (tmp_path / ".gitignore").read_text()

    def test_no_op_when_already_setup(self, tmp_path: Path) -> None:
        gitignore = tmp_path / ".gitignore"
        original = "# Byte runtime data\n.byte/\n"
        gitignore.write_text(original)

        ensure_gitignore(tmp_path)

        assert gitignore.read_text() == original
