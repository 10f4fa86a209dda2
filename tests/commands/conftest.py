"""Fixtures for CLI command tests."""

import pytest

from byte_assist.cli_utils import console


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Stop rich from wrapping long tmp paths in command output."""
    monkeypatch.setattr(console, "width", 200)
