"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from slaynode.config import reset_default_values

from tests.helpers.fakes import FakeCollector, FakeCommandRunner


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    """Keep .env files and SLAYNODE_* variables from leaking into tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in (
        "SLAYNODE_REFRESH_INTERVAL",
        "SLAYNODE_COMMAND_TIMEOUT",
        "SLAYNODE_SHUTDOWN_TIMEOUT",
        "SLAYNODE_GRACE_PERIOD",
        "SLAYNODE_PS_PATH",
        "SLAYNODE_LSOF_PATH",
        "SLAYNODE_PREFERENCES_PATH",
        "SLAYNODE_LOG_LEVEL",
        "SLAYNODE_LOG_DIR",
        "SLAYNODE_LOG_APPEND",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_default_values()
    yield
    reset_default_values()


@pytest.fixture
def fake_runner() -> FakeCommandRunner:
    return FakeCommandRunner()


@pytest.fixture
def fake_collector() -> FakeCollector:
    return FakeCollector()
