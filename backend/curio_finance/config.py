"""
Application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from typing import Literal, Optional


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Curio"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./data/db.sqlite"

    # Scheduled trigger (Authorization: Bearer <cron_secret>)
    cron_secret: Optional[str] = None

    # Recurring processing
    recurring_catch_up: Literal["one", "all"] = "one"
    recurring_max_catch_up: int = 366

    # LLM
    default_llm_provider: str = "groq"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 1000
    llm_log_capacity: int = 200

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    frontend_url: str = "http://localhost:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


# Global settings instance
settings = Settings()
