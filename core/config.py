"""
Configuration management using Pydantic Settings
Handles environment variables and validation
"""
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Factory engine settings with environment variable support"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Environment
    environment: str = Field(default="test")

    # Database
    database_url: str = Field(default="sqlite://")
    database_echo: bool = Field(default=False)

    # Logging
    log_level: str = Field(default="WARNING")
    log_format: str = Field(default="text")  # json or text

    # Fake data
    faker_locale: str = Field(default="en_US")
    faker_seed: Optional[int] = Field(default=None)

    # Struct strategy
    default_primary_key: str = Field(default="id", description="Primary key synthesized when no schema is bound")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level: {v}")
        return v

    @field_validator("default_primary_key")
    @classmethod
    def validate_default_primary_key(cls, v):
        if not v.isidentifier():
            raise ValueError("Primary key name must be a valid identifier")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
