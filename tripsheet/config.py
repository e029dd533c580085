"""
Configuration management for tripsheet.
Supports multiple structured-generation providers: Gemini, OpenAI, OpenRouter, Ollama.
"""
from datetime import date
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # LLM Configuration
    llm_provider: Literal["gemini", "openai", "openrouter", "ollama"] = "gemini"
    llm_api_key: str = ""
    llm_base_url: str = ""
    llm_model: str = "gemini-2.5-flash"
    llm_temperature: float = 0.2
    llm_max_tokens: int = 16000
    llm_timeout_seconds: float = 120.0
    llm_structured_output: bool = True
    output_language: str = "Traditional Chinese"

    # Source document
    sheet_id: str = "1uDYMnPGfWsYKpshxV-r0Qg6TzPG-3wczMy4qLhQV2Cw"
    sheet_export_url: str = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv"
    http_timeout_seconds: float = 15.0

    # Trip defaults
    trip_anchor_date: date = date(2025, 10, 28)
    trip_length_days: int = 8
    default_participants: int = 6

    # Weather
    weather_base_url: str = "https://api.open-meteo.com/v1/forecast"

    # Expense editing
    expense_debounce_seconds: float = 0.5

    # Server Configuration
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = True
    log_level: str = "INFO"


# Global settings instance
settings = Settings()


def get_llm_config() -> dict:
    """Get LLM configuration based on provider."""
    config = {
        "api_key": settings.llm_api_key,
        "model": settings.llm_model,
        "temperature": settings.llm_temperature,
        "max_tokens": settings.llm_max_tokens,
        "timeout": settings.llm_timeout_seconds,
    }

    # Set base URL based on provider
    if settings.llm_provider == "ollama":
        config["base_url"] = settings.llm_base_url or "http://localhost:11434/v1"
        config["api_key"] = settings.llm_api_key or "ollama"  # Not needed for Ollama
    elif settings.llm_provider == "gemini":
        config["base_url"] = settings.llm_base_url or "https://generativelanguage.googleapis.com/v1beta/openai/"
    elif settings.llm_provider == "openrouter":
        config["base_url"] = settings.llm_base_url or "https://openrouter.ai/api/v1"
    else:  # openai
        config["base_url"] = settings.llm_base_url or "https://api.openai.com/v1"

    return config
