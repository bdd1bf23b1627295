"""
Settings Module
===============

Environment-driven configuration for proving, verification and
submissions. Nested sections read their own prefixed variables
(`ZK_BUILD_DIR`, `SUBMISSION_SUBMITTER`, ...). Relative directories are
taken relative to the project root, so scripts behave the same from any
working directory.

Version: 0.1.0
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_ROOT = Path(__file__).parent.parent.parent


class Environment(str, Enum):
    """Deployment environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ZKSettings(BaseSettings):
    """Proving engine and circuit artifact configuration."""

    model_config = SettingsConfigDict(env_prefix="ZK_")

    # Compiled circuits and keys: build/<circuit>/...
    build_dir: Path = Field(default_factory=lambda: PROJECT_ROOT / "build")
    # Persisted proofs and composites
    data_dir: Path = Field(default_factory=lambda: PROJECT_ROOT / "data")

    snarkjs_command: str = "npx snarkjs"
    timeout_seconds: int = Field(default=300, ge=1)
    max_concurrent_proofs: int = Field(default=3, ge=1)

    @field_validator("build_dir", "data_dir")
    @classmethod
    def anchor_to_project_root(cls, v: Path) -> Path:
        return v if v.is_absolute() else PROJECT_ROOT / v

    @property
    def snarkjs_argv(self) -> list[str]:
        """Split the configured command into argv form."""
        return self.snarkjs_command.split()


class SubmissionSettings(BaseSettings):
    """Defaults stamped onto composite submissions."""

    model_config = SettingsConfigDict(env_prefix="SUBMISSION_")

    submitter: str = "AI Lab Example Inc."
    framework: str = "EU AI Act + RSP"


class Settings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables with sensible defaults.
    Use the global `settings` singleton or call `get_settings()`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # General
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = True
    log_level: LogLevel = LogLevel.INFO
    json_logs: bool = False

    project_root: Path = Field(default_factory=lambda: PROJECT_ROOT)

    zk: ZKSettings = Field(default_factory=ZKSettings)
    submission: SubmissionSettings = Field(default_factory=SubmissionSettings)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Ensure log level is uppercase."""
        if isinstance(v, str):
            return LogLevel(v.upper())
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.environment == Environment.TESTING


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings singleton.
    """
    return Settings()
