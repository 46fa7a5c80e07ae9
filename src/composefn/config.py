"""
Centralized configuration for composefn.

Uses Pydantic BaseSettings for environment variable integration
and validation.

Configuration sources (in order of precedence):
1. Explicit constructor arguments
2. Environment variables (COMPOSEFN_*)
3. .env file
4. Default values

Example:
    from composefn.config import get_config

    config = get_config()
    print(config.response_ttl_seconds)  # From COMPOSEFN_RESPONSE_TTL_SECONDS or 60

    # Override at runtime
    config = get_config(log_format="text")
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FunctionConfig(BaseSettings):
    """
    Configuration for the composition function.

    All settings can be overridden via environment variables
    prefixed with COMPOSEFN_.

    Example:
        export COMPOSEFN_LOG_LEVEL=debug
        export COMPOSEFN_RESPONSE_TTL_SECONDS=30
    """

    model_config = SettingsConfigDict(
        env_prefix="COMPOSEFN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    service_name: str = Field(
        default="composefn",
        description="Service name for log attribution",
    )

    # Logging
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info",
        description="Logging level for composefn",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="Log output format (json for log shippers, text for console)",
    )

    # Response
    response_ttl_seconds: float = Field(
        default=60.0,
        ge=0,
        description="How long the runtime may cache a response",
    )

    @field_validator("log_level", "log_format", mode="before")
    @classmethod
    def lowercase(cls, v: object) -> object:
        """Accept DEBUG/Info/etc."""
        if isinstance(v, str):
            return v.lower()
        return v


# Global singleton
_config: Optional[FunctionConfig] = None


def get_config(**overrides) -> FunctionConfig:
    """
    Get the global configuration instance.

    Creates a singleton on first call. Subsequent calls return
    the same instance unless overrides are provided.
    """
    global _config

    if overrides or _config is None:
        _config = FunctionConfig(**overrides)

    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
