"""
Application Settings
===================

Flagrant settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Flagrant", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )

    # Rendering Configuration
    default_width: int = Field(default=400, gt=0, description="Default canvas width")
    default_height: int = Field(default=300, gt=0, description="Default canvas height")
    max_width: int = Field(default=4000, gt=0, description="Maximum canvas width")
    max_height: int = Field(default=4000, gt=0, description="Maximum canvas height")

    # Output Configuration
    output_path: Path = Field(default=Path("out.png"), description="Default PNG output path")

    # Logging Configuration
    log_level: str = Field(default="WARNING", description="Logging level")
    log_format: str = Field(default="console", description="Log format: console, json")
    log_file: Optional[Path] = Field(default=None, description="Optional log file path")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed = {"console", "json"}
        if v.lower() not in allowed:
            raise ValueError(f"Log format must be one of: {allowed}")
        return v.lower()

    @model_validator(mode="after")
    def check_default_size(self) -> "Settings":
        """Default canvas must fit inside the maximum canvas."""
        if self.default_width > self.max_width or self.default_height > self.max_height:
            raise ValueError(
                f"Default canvas {self.default_width}x{self.default_height} exceeds "
                f"maximum {self.max_width}x{self.max_height}"
            )
        return self

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="FLAGRANT_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
