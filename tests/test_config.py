"""Tests for environment-driven settings."""

import pydantic
import pytest

from showdown.config import ModelProvider, Settings, get_settings, reset_settings
from showdown.lib.exceptions import ConfigurationError


class TestModelRouting:

    @pytest.mark.parametrize(
        "model,provider",
        [
            ("gemini-2.5-flash", ModelProvider.GEMINI),
            ("claude-3-5-haiku-20241022", ModelProvider.ANTHROPIC),
            ("gpt-4o-mini", ModelProvider.OPENAI),
            ("google/gemini-2.5-flash", ModelProvider.OPENROUTER),
            ("mystery-model", ModelProvider.OPENROUTER),
        ],
    )
    def test_get_model_provider(self, model, provider):
        assert Settings(_env_file=None).get_model_provider(model) == provider


class TestCredentials:

    def test_missing_key_is_configuration_error(self):
        settings = Settings(_env_file=None, gemini_api_key="")
        with pytest.raises(ConfigurationError) as exc_info:
            settings.require_credentials()
        assert exc_info.value.setting == "gemini_api_key"

    def test_key_for_routed_provider_passes(self):
        settings = Settings(
            _env_file=None,
            commentary_model="google/gemini-2.5-flash",
            openrouter_api_key="or-key",
        )
        settings.require_credentials()

    def test_placeholder_key_counts_as_missing(self):
        settings = Settings(
            _env_file=None,
            commentary_model="claude-3-5-haiku-20241022",
            anthropic_api_key="sk-ant-...",
        )
        assert settings.has_anthropic_key is False
        with pytest.raises(ConfigurationError):
            settings.require_credentials()

    def test_api_key_env_alias(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        monkeypatch.setenv("API_KEY", "from-env")
        assert Settings(_env_file=None).gemini_api_key == "from-env"


class TestSettingsValues:

    def test_defaults(self, monkeypatch):
        for name in ("DECISION_DELAY", "COMMENTARY_TIMEOUT", "DISPLAY_LANGUAGE"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.decision_delay == 1.5
        assert settings.commentary_timeout == 5.0
        assert settings.display_language == "zh-TW"

    def test_unsupported_language_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, display_language="fr")

    def test_negative_delay_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, decision_delay=-1)

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("DECISION_DELAY", "0.25")
        monkeypatch.setenv("DISPLAY_LANGUAGE", "en")
        settings = Settings(_env_file=None)
        assert settings.decision_delay == 0.25
        assert settings.display_language == "en"


class TestSingleton:

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_reset_settings_rebuilds(self):
        first = get_settings()
        reset_settings()
        assert get_settings() is not first
