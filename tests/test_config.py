"""Tests for application settings."""

from mealplanner.config import Settings


def test_defaults() -> None:
    """Test planning defaults and the unconfigured generator."""
    settings = Settings(_env_file=None, openai_api_key="")
    assert settings.default_cooking_time_weekday == 20
    assert settings.default_cooking_time_weekend == 45
    assert not settings.generation_configured


def test_environment() -> None:
    """Test development detection is case-insensitive."""
    assert Settings(_env_file=None, environment="Development").is_development
    assert not Settings(_env_file=None, environment="production").is_development
