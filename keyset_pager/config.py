"""Configuration management for keyset-pager."""

import logging
from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Library settings with environment variable support."""

    # Pagination settings
    default_page_size: int = 10
    max_page_size: int = 200
    default_order: str = "DESC"
    default_keys: List[str] = ["id"]

    # Query execution settings
    db_command_timeout: int = 60

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("default_order")
    @classmethod
    def validate_default_order(cls, v):
        """Validate default order."""
        if v.upper() not in ("ASC", "DESC"):
            raise ValueError("Default order must be one of: ['ASC', 'DESC']")
        return v.upper()

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "KEYSET_PAGER_",
        "case_sensitive": False,
        "extra": "ignore",
        "env_parse_none_str": True,
    }


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get library settings."""
    return settings


def configure_logging(config: Settings = None) -> None:
    """Configure root logging from settings."""
    config = config or get_settings()
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format=config.log_format
    )
    logging.getLogger().setLevel(getattr(logging, config.log_level))
