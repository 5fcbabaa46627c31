"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden with a SOURCEGATE_-prefixed env var
    - get_settings() is cached (lru_cache) — single instance per process
    - These are process settings, NOT engine configuration: engine settings
      arrive per call through Session.apply_configuration()

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - engine_module is a dotted import path so deployments pick their binding
      without code changes
"""

from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="SOURCEGATE_", case_sensitive=False,
        extra="ignore",
    )

    # Engine
    engine_module: str = "biome_wasm"

    @field_validator("engine_module")
    @classmethod
    def strip_engine_module(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("engine_module cannot be empty")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
