# tests/conftest.py
import logging
import os
from unittest.mock import MagicMock

import pytest

from settings.config_models import AppSettings


@pytest.fixture(autouse=True)
def clean_installer_env(monkeypatch):
    """Keep SSI_* variables from the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("SSI_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("SUDO_USER", raising=False)


@pytest.fixture
def mock_logger():
    """Fixture to create a mock logger for testing."""
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def app_settings(tmp_path):
    """Real settings rooted in a temporary directory."""
    return AppSettings(config_root=str(tmp_path / "docker-configs"))


@pytest.fixture
def dry_run_settings(tmp_path):
    """Dry-run settings rooted in a temporary directory."""
    return AppSettings(
        dry_run=True, config_root=str(tmp_path / "docker-configs")
    )


@pytest.fixture
def logged_messages(mock_logger):
    """All messages sent to ``mock_logger`` at any level."""

    def _collect():
        messages = []
        for method in ("debug", "info", "warning", "error", "critical"):
            for call in getattr(mock_logger, method).call_args_list:
                messages.append(call.args[0])
        return messages

    return _collect
