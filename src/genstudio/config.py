"""
Configuration management for genstudio
"""

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Backend
    api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("GENSTUDIO_API_KEY", "GEMINI_API_KEY", "API_KEY"),
    )
    api_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    text_model: str = "gemini-2.5-flash"
    video_model: str = "veo-2.0-generate-001"
    request_timeout: float = 30.0
    download_timeout: float = 300.0

    # Video job polling
    poll_interval: float = 10.0  # seconds between status checks
    initial_progress: int = 0
    accepted_progress: int = 25
    progress_step: int = 10
    progress_ceiling: int = 90
    finishing_progress: int = 95

    # Timeline
    # 'id' routes intermediate progress to the job's own placeholder,
    # 'positional' updates the first loading message found
    progress_routing: Literal["id", "positional"] = "id"

    # Environment
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "GENSTUDIO_"
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"


# Global settings instance
settings = Settings()
