"""Pytest configuration and shared fixtures."""

import logfire
import pytest

from checklist.core.config import Settings


@pytest.fixture(scope="session", autouse=True)
def _quiet_logfire() -> None:
    """Keep spans local and off the console during tests."""
    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def test_settings() -> Settings:
    """Settings built from defaults only, ignoring any local .env file."""
    return Settings(_env_file=None)
