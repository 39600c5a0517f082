"""
Configuration settings for mockdb.

Uses Pydantic Settings to load environment variables for the storage
substrate, simulated latencies, and logging. Latencies are configured in
milliseconds and exposed in seconds for the delay abstraction.
"""
from __future__ import annotations

from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Storage substrate
    storage_dir: str = Field(".mockdb", alias="MOCKDB_STORAGE_DIR")
    key_prefix: str = Field("mock_", alias="MOCKDB_KEY_PREFIX")
    strict_writes: bool = Field(False, alias="MOCKDB_STRICT_WRITES")

    # Simulated latency
    collection_latency_ms: int = Field(500, alias="MOCKDB_COLLECTION_LATENCY_MS", ge=0)
    realtime_latency_ms: int = Field(300, alias="MOCKDB_REALTIME_LATENCY_MS", ge=0)
    sync_latency_ms: int = Field(100, alias="MOCKDB_SYNC_LATENCY_MS", ge=0)

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def collection_latency(self) -> float:
        return self.collection_latency_ms / 1000.0

    @property
    def realtime_latency(self) -> float:
        return self.realtime_latency_ms / 1000.0

    @property
    def sync_latency(self) -> float:
        return self.sync_latency_ms / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
