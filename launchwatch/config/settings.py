"""Application settings and configuration management."""

from pathlib import Path
from typing import Literal

import structlog
import yaml
from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

logger = structlog.get_logger(__name__)

PROFILES = ("dev", "prod")


class AppSettings(BaseSettings):
    """Application settings with environment variable support."""

    env: Literal["dev", "prod"] = Field(description="Environment: dev, prod")

    # Backend
    api_base_url: str = Field(
        default="http://localhost:8000", description="Token backend base URL"
    )
    with_twitter: bool = Field(
        default=False, description="Only fetch tokens that have a Twitter link"
    )

    # Polling
    poll_interval_seconds: float = Field(
        default=60.0, gt=0, description="Seconds between token fetches"
    )
    discard_stale_responses: bool = Field(
        default=False, description="Drop fetch responses that complete out of order"
    )

    # Notifications
    notify_on_first_load: bool = Field(
        default=False, description="Notify about every token of the first snapshot"
    )
    assume_page_hidden: bool = Field(
        default=True, description="Treat the operator page as hidden"
    )
    telegram_bot_token: str | None = Field(
        default=None, description="Telegram bot token"
    )
    telegram_chat_ids: list[int] = Field(
        default_factory=list, description="Telegram chats receiving notifications"
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Minimum log level"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


def load_settings(profile: str, yaml_path: str) -> AppSettings:
    """Load settings from YAML file and environment variables.

    Args:
        profile: Configuration profile name (dev, prod)
        yaml_path: Path to YAML configuration file

    Returns:
        AppSettings instance with loaded configuration

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValidationError: If configuration is invalid
        ValueError: If profile is invalid
    """
    if profile not in PROFILES:
        raise ValueError(f"Invalid profile: {profile}. Must be one of: dev, prod")

    yaml_file = Path(yaml_path)
    if not yaml_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

    try:
        with open(yaml_file, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        if not isinstance(yaml_config, dict):
            raise ValueError("Configuration root must be a mapping")

        yaml_config["env"] = profile

        logger.info("Loading configuration", profile=profile, yaml_path=yaml_path)

        settings = AppSettings(**yaml_config)

        logger.info(
            "Configuration loaded successfully",
            profile=profile,
            api_base_url=settings.api_base_url,
            poll_interval_seconds=settings.poll_interval_seconds,
        )

        return settings

    except yaml.YAMLError as e:
        logger.error("Failed to parse YAML configuration", error=str(e))
        raise ValueError(f"Invalid YAML configuration: {e}") from e
    except ValidationError as e:
        logger.error("Configuration validation failed", error=str(e))
        raise
