"""
Memcache Client Configuration Settings

This module contains the configuration constants for the memcache client.
Defaults can be overridden through environment variables.
"""

import os
from dataclasses import dataclass

SECONDS_IN_THIRTY_DAYS = 60 * 60 * 24 * 30


@dataclass
class Settings:
    """Client configuration settings."""

    # Expiration cannot exceed 30 days
    MAX_EXPIRATION: int = int(
        os.environ.get("MEMCACHE_MAX_EXPIRATION", str(SECONDS_IN_THIRTY_DAYS))
    )

    # Codec for text keys and values
    ENCODING: str = os.environ.get("MEMCACHE_ENCODING", "utf-8")

    # Logging settings
    DEBUG: bool = os.environ.get("MEMCACHE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("MEMCACHE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
