"""
WebPrint Service Configuration Module

Centralized configuration management with Pydantic validation.
All settings come from environment variables; an absent OpenAI key is a
valid configuration and simply disables title suggestions.
"""

import logging
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class WebPrintSettings(BaseSettings):
    """
    WebPrint service configuration with validation.

    All settings can be overridden via environment variables
    (OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_MODEL, PORT, ...).
    """

    # === Title suggestions (OpenAI-compatible provider) ===
    openai_api_key: str = Field(
        default="",
        description="API key for the completions provider; empty disables title suggestions"
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of an OpenAI-compatible API"
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="Model name sent with completion requests"
    )
    llm_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for the completions request"
    )

    # === Server ===
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=3000, ge=1, le=65535, description="HTTP bind port")
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins"
    )
    log_level: str = Field(default="INFO", description="Root log level")

    # === Rendering ===
    navigation_timeout_ms: int = Field(
        default=60000,
        ge=1000,
        description="Page navigation timeout in milliseconds"
    )
    fetch_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for the plain HTML fetch used by title suggestions"
    )
    playwright_headless: bool = Field(default=True, description="Run Chromium headless")

    @field_validator("openai_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an HTTP(S) base URL and drop any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"Invalid URL format: {v}")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of: {', '.join(sorted(allowed))}")
        return v_upper

    @property
    def llm_enabled(self) -> bool:
        """Title suggestions are available only when a key is configured."""
        return bool(self.openai_api_key)

    @property
    def completions_url(self) -> str:
        return f"{self.openai_base_url}/chat/completions"

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins into a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_prefix = ""  # No prefix, use exact env var names
        case_sensitive = False  # OPENAI_API_KEY = openai_api_key


@lru_cache()
def get_settings() -> WebPrintSettings:
    """
    Get cached settings instance.

    Settings are loaded once and cached. Tests that change the environment
    call ``get_settings.cache_clear()``.
    """
    return WebPrintSettings()


def log_config_on_startup() -> None:
    """Log the loaded configuration with secrets redacted."""
    settings = get_settings()

    logger.info("Configuration loaded:")
    logger.info(f"  listen={settings.host}:{settings.port}")
    logger.info(f"  openai_base_url={settings.openai_base_url}")
    logger.info(f"  openai_model={settings.openai_model}")
    logger.info(f"  openai_api_key={'*****' if settings.openai_api_key else '(not set)'}")
    logger.info(f"  navigation_timeout={settings.navigation_timeout_ms}ms")

    if not settings.llm_enabled:
        logger.warning("OPENAI_API_KEY not set - title suggestions are disabled")
