"""Engine settings loaded from environment variables via pydantic-settings."""

from enum import StrEnum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageBackendKind(StrEnum):
    memory = "memory"
    redis = "redis"


class LogFormat(StrEnum):
    json = "json"
    console = "console"


class Settings(BaseSettings):
    """Central configuration. All values are sourced from env vars or .env file."""

    model_config = SettingsConfigDict(
        env_prefix="CROPSIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ── Storage ─────────────────────────────────────────────────────────────
    storage_backend: StorageBackendKind = StorageBackendKind.memory
    redis_url: str = "redis://localhost:6379/0"
    redis_key_prefix: str = "cropsim:"

    # ── Simulation ──────────────────────────────────────────────────────────
    species: str = "oat"
    rng_seed: int | None = None

    # ── Observability ───────────────────────────────────────────────────────
    log_level: str = "info"
    log_format: LogFormat = LogFormat.json


@lru_cache
def get_settings() -> Settings:
    """Singleton settings instance (cached after first call)."""
    return Settings()
