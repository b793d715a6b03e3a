"""
Central configuration for the Club Live service.
Uses pydantic-settings for env-based config with validation.
"""
from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Environment(str, Enum):
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Root settings for the API service."""

    model_config = SettingsConfigDict(
        env_prefix="CL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # ── General ──────────────────────────────────────────────
    environment: Environment = Environment.DEV
    debug: bool = False
    log_level: str = "INFO"
    instance_id: str = Field(default="", description="Pod/container ID bound to every log entry")

    # ── API ──────────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    api_workers: int = 1
    cors_origins: list[str] = ["*"]

    # ── Upstream scoring API ─────────────────────────────────
    upstream_base_url: str = "https://grassrootsapiproxy.cricket.com.au/scores"
    upstream_feature_flag: str = Field(
        default="eccn:true",
        description="Value of the jsconfig query parameter sent on upstream calls.",
    )
    upstream_timeout_s: Optional[float] = Field(
        default=None,
        description="Per-request timeout for upstream calls. None waits indefinitely.",
    )

    # ── Club config endpoint ─────────────────────────────────
    club_config_path: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("CL_CLUB_CONFIG", "CLUB_CONFIG"),
    )
    bundled_club_config: Path = PROJECT_ROOT / "config.json"

    # ── Observability ────────────────────────────────────────
    metrics_enabled: bool = True
    metrics_port: int = 9090

    @field_validator("upstream_base_url")
    @classmethod
    def check_upstream_url(cls, value: str) -> str:
        if urlparse(value).scheme not in ("http", "https"):
            raise ValueError("upstream_base_url must start with http/https")
        return value.rstrip("/")

    @field_validator("upstream_timeout_s")
    @classmethod
    def check_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("upstream_timeout_s must be positive")
        return value

    def resolve_path(self, raw: str) -> Path:
        """Resolve a configured path; relative paths are taken from the project root."""
        path = Path(raw)
        return path if path.is_absolute() else PROJECT_ROOT / path


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Singleton access to validated settings."""
    return Settings()
