"""Application settings via Pydantic BaseSettings."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from leaguescope.constants import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SEARCH_DEBOUNCE_MS,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
)
from leaguescope.exceptions import ConfigError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="LEAGUESCOPE_"
    )

    # Backend
    api_base_url: str = "http://localhost:3333"
    api_timeout_seconds: float = 30.0
    api_max_attempts: int = 2  # GETs only; deletes are never retried
    api_retry_delay_ms: int = 250

    # Lists
    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = MAX_PAGE_SIZE
    search_debounce_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    def validate_bounds(self) -> None:
        """Raise ConfigError when page-size settings are inconsistent."""
        if not MIN_PAGE_SIZE <= self.max_page_size <= MAX_PAGE_SIZE:
            msg = f"max_page_size must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}"
            raise ConfigError(msg)
        if not MIN_PAGE_SIZE <= self.default_page_size <= self.max_page_size:
            msg = f"default_page_size must be between {MIN_PAGE_SIZE} and max_page_size"
            raise ConfigError(msg)
        if self.api_max_attempts < 1:
            raise ConfigError("api_max_attempts must be at least 1")
        if self.search_debounce_ms < 0:
            raise ConfigError("search_debounce_ms cannot be negative")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    settings = Settings()
    settings.validate_bounds()
    return settings
