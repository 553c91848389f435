"""Application configuration using pydantic-settings."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppSettings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SHOPCAT_",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Logging configuration
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(LOG_LEVELS)}")
        return level

    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log message format string",
    )

    # Export configuration
    output_dir: str = Field(
        default=".",
        description="Directory export files are written to",
    )

    export_locale: Literal["en", "ru"] = Field(
        default="en",
        description="Language of the CSV header row",
    )


def get_settings() -> AppSettings:
    """Get the application settings instance."""
    return AppSettings()
