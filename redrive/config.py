"""
Centralized Configuration System
Environment-aware settings for the redrive service.
"""
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import Literal, Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REDRIVE_",
        extra="ignore"
    )
    """
    Process-wide settings.
    Loads from REDRIVE_* environment variables with sensible defaults.
    Per-queue settings live in the JSON configuration file (see config_file).
    """

    # ============================================
    # QUEUE CONFIGURATION
    # ============================================
    config_file: str = "config.json"

    # ============================================
    # PROCESSOR LIFECYCLE
    # ============================================
    stop_grace_seconds: float = Field(default=30.0, gt=0)

    # ============================================
    # SQS TRANSPORT
    # ============================================
    sqs_wait_time_seconds: int = Field(default=20, ge=0, le=20)
    sqs_visibility_timeout: Optional[int] = None

    # ============================================
    # LOGGING
    # ============================================
    log_level: Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    enable_structured_logging: bool = False  # Set to True for production JSON logs

    # ============================================
    # ENVIRONMENT
    # ============================================
    environment: Literal["development", "staging", "production"] = "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Singleton pattern for settings.
    Uses LRU cache to ensure only one Settings instance exists.
    """
    return Settings()
