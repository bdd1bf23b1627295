"""
Configuration Module
====================

Centralized configuration management using Pydantic Settings.
Loads from environment variables with type validation and defaults.

Usage:
    from govproof.config import settings

    print(settings.environment)
    print(settings.zk.build_dir)
"""

from govproof.config.settings import (
    Environment,
    LogLevel,
    Settings,
    SubmissionSettings,
    ZKSettings,
    get_settings,
)


# Global settings instance (singleton)
settings = get_settings()

__all__ = [
    "Settings",
    "ZKSettings",
    "SubmissionSettings",
    "get_settings",
    "settings",
    "Environment",
    "LogLevel",
]
