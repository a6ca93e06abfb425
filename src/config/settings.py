# src/config/settings.py — v1
"""Typed configuration loaded from the environment / .env via pydantic-settings.

Every variable is prefixed with HALGRAPH_ (e.g. HALGRAPH_CACHE_BACKEND=sqlite).
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Client settings loaded from .env file and environment."""

    model_config = SettingsConfigDict(
        env_prefix="HALGRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === HTTP transport ===
    http_timeout_seconds: float = Field(default=20.0, gt=0)
    user_agent: str = Field(default="halgraph/0.1", min_length=1)
    http_follow_redirects: bool = True

    # === Offline mode ===
    offline_enabled: bool = False
    start_offline: bool = False
    offline_coalesce_requests: bool = True

    # === Cache ===
    cache_backend: Literal["memory", "sqlite", "redis"] = "memory"
    cache_root: Path = Path("~/.halgraph/cache")
    cache_redis_url: str = ""
    cache_key_prefix: str = "halgraph"

    # === Extraction ===
    backfill_embedded_links: bool = False

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "text"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("log_retention")
    @classmethod
    def validate_log_retention(cls, v: int) -> int:
        if v < 0:
            raise ValueError("log_retention must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.cache_backend == "redis" and not self.cache_redis_url:
            errors.append("CACHE_BACKEND=redis requires CACHE_REDIS_URL")

        if self.start_offline and not self.offline_enabled:
            errors.append("START_OFFLINE requires OFFLINE_ENABLED")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def sqlite_path(self) -> Path:
        """Database file used by the sqlite cache backend."""
        return self.cache_root.expanduser() / "halgraph_cache.db"


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
