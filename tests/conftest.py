"""Shared fixtures for Showdown tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from showdown.config import Settings, reset_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    """Drop the cached settings singleton around every test."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        gemini_api_key="test-key",
        decision_delay=0,
        commentary_timeout=0.5,
        display_language="zh-TW",
    )


@pytest.fixture
def provider() -> MagicMock:
    """Commentary provider stub that always answers."""
    mock_provider = MagicMock()
    mock_provider.generate = AsyncMock(return_value="好手氣！")
    return mock_provider
