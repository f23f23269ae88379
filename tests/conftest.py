"""Shared fixtures for the neatest test suite."""

import sys
from pathlib import Path

import pytest
from loguru import logger

from neatest.config import get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"

EXAMPLE_INTERNAL = """\
SET UTF-8
NEA DIC {
    2
    cat
    dog
}
NEA TESTGOODWORDS {
    cat
}
"""


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Clear the settings cache before and after each test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def clear_test_env(monkeypatch):
    """Keep the runner's environment variables from leaking into tests."""
    for name in ("EXT_TEST_DIR", "INT_TEST_DIR", "INT_TEST_CMD", "EXT_TEST_CMD"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo logging sinks and the exception hook the CLI installs."""
    original_hook = sys.excepthook
    yield
    sys.excepthook = original_hook
    logger.remove()


@pytest.fixture
def log_messages():
    """Collect loguru messages at WARNING and above."""
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(msg.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def dirs(tmp_path):
    """Separate internal and external directories."""
    internal = tmp_path / "internal"
    external = tmp_path / "external"
    internal.mkdir()
    external.mkdir()
    return internal, external
