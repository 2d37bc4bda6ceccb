"""Configuration management using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SSHKEYGEN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Key defaults
    default_algorithm: Literal["rsa", "ed25519", "ecdsa"] = Field(
        default="rsa",
        description="Algorithm used by the non-interactive mode when -t is not given",
    )
    output_dir: str = Field(
        default=".",
        description="Directory for default key filenames (id_rsa, id_ed25519, id_ecdsa)",
    )

    # Interactive timing
    settle_delay: float = Field(
        default=2.0,
        ge=0.0,
        description="Seconds to hold the finished progress bar before the success screen",
    )
    tick_interval: float = Field(
        default=0.1,
        gt=0.0,
        description="Period of the progress bar animation in seconds",
    )
    stage_pacing_scale: float = Field(
        default=1.0,
        ge=0.0,
        description="Multiplier for the cosmetic per-stage delays (0 disables them)",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Minimum log level",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console formatted ones",
    )
    log_file: str | None = Field(
        default=None,
        description="Append logs to this file instead of stderr",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
