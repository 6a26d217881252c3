"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Text generation (OpenAI-compatible chat completions)
    openai_api_key: str = ""
    openai_base_url: str | None = None  # None means the public OpenAI endpoint
    generation_model: str = "gpt-4o-mini"
    generation_temperature: float = 0.8
    generation_timeout: float = 60.0  # seconds per generation call

    # Planning defaults
    default_cooking_time_weekday: int = 20  # minutes
    default_cooking_time_weekend: int = 45  # minutes
    currency: str = "EUR"

    # Application
    environment: str = "development"
    log_level: str = "INFO"
    allowed_origins: str = "http://localhost:3000,http://localhost:8000"

    @property
    def generation_configured(self) -> bool:
        """Check if credentials for the generation capability are present."""
        return bool(self.openai_api_key.strip())

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
