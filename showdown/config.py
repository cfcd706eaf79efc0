"""Application configuration from environment variables."""

from enum import Enum

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from showdown.lib.exceptions import ConfigurationError
from showdown.lib.locale import LOCALES


class ModelProvider(str, Enum):
    """LLM provider types."""

    GEMINI = "gemini"
    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    OPENROUTER = "openrouter"


class ModelType(str, Enum):
    """Known commentary models."""

    GEMINI_FLASH = "gemini-2.5-flash"
    CLAUDE_HAIKU = "claude-3-5-haiku-20241022"
    GPT_4O_MINI = "gpt-4o-mini"

    # OpenRouter models (provider prefix required)
    GEMINI_FLASH_OPENROUTER = "google/gemini-2.5-flash"


# =============================================================================
# Settings
# =============================================================================


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # API Keys
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("gemini_api_key", "google_api_key", "api_key"),
        description="Gemini API key",
    )
    anthropic_api_key: str = Field(default="", description="Anthropic API key")
    openai_api_key: str = Field(default="", description="OpenAI API key")
    openrouter_api_key: str = Field(default="", description="OpenRouter API key")

    # Application settings
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    server_host: str = Field(default="127.0.0.1", description="Bind address")
    server_port: int = Field(default=8001, description="Bind port")
    display_language: str = Field(default="zh-TW", description="Display and prompt language")

    # Round pacing
    decision_delay: float = Field(
        default=1.5, ge=0, description="Seconds between choice and reveal"
    )
    random_seed: int | None = Field(
        default=None, description="Seed for the opponent's random source"
    )

    # Commentary
    commentary_model: str = Field(
        default=ModelType.GEMINI_FLASH.value,
        description="Model used for post-round commentary",
    )
    commentary_timeout: float = Field(
        default=5.0, gt=0, description="Seconds before commentary falls back"
    )
    commentary_max_tokens: int = Field(default=256, gt=0)
    commentary_temperature: float = Field(default=0.9, ge=0, le=2)
    commentary_max_chars: int = Field(
        default=20, gt=0, description="Length hint passed to the model"
    )

    @field_validator("display_language")
    @classmethod
    def known_language(cls, v: str) -> str:
        """Reject languages without a string table."""
        if v not in LOCALES:
            raise ValueError(f"Unsupported language '{v}', expected one of {sorted(LOCALES)}")
        return v

    @property
    def has_gemini_key(self) -> bool:
        """Check if Gemini API key is configured."""
        return bool(self.gemini_api_key)

    @property
    def has_anthropic_key(self) -> bool:
        """Check if Anthropic API key is configured."""
        return bool(
            self.anthropic_api_key and self.anthropic_api_key != "sk-ant-..."
        )

    @property
    def has_openai_key(self) -> bool:
        """Check if OpenAI API key is configured."""
        return bool(self.openai_api_key and self.openai_api_key != "sk-...")

    @property
    def has_openrouter_key(self) -> bool:
        """Check if OpenRouter API key is configured."""
        return bool(
            self.openrouter_api_key and self.openrouter_api_key != "sk-or-..."
        )

    def get_model_provider(self, model: str) -> ModelProvider:
        """Determine which provider to use for a given model."""
        # OpenRouter format: provider/model
        if "/" in model:
            return ModelProvider.OPENROUTER

        if model.startswith("gemini-"):
            return ModelProvider.GEMINI

        if model.startswith("gpt-"):
            return ModelProvider.OPENAI

        if model.startswith("claude-"):
            return ModelProvider.ANTHROPIC

        # Default to OpenRouter for unknown models
        return ModelProvider.OPENROUTER

    def has_key_for(self, provider: ModelProvider) -> bool:
        """Check whether the given provider has a credential."""
        return {
            ModelProvider.GEMINI: self.has_gemini_key,
            ModelProvider.ANTHROPIC: self.has_anthropic_key,
            ModelProvider.OPENAI: self.has_openai_key,
            ModelProvider.OPENROUTER: self.has_openrouter_key,
        }[provider]

    def require_credentials(self) -> None:
        """Fail fast when the commentary model has no API key."""
        provider = self.get_model_provider(self.commentary_model)
        if not self.has_key_for(provider):
            raise ConfigurationError(
                f"No API key configured for {provider.value} "
                f"(commentary model '{self.commentary_model}')",
                setting=f"{provider.value}_api_key",
            )


# =============================================================================
# Singleton
# =============================================================================


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
