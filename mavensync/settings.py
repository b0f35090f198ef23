"""Runtime configuration for the Maven repository sync tool."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _normalize_base(url: str) -> str:
    return url.rstrip("/") + "/"


class Settings(BaseSettings):
    """Configuration values mapped from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Remote repository
    nexus_url: str
    nexus_snapshot_url: Optional[str] = None
    nexus_username: Optional[str] = None
    nexus_password: Optional[str] = None

    # Local tree and run behaviour
    nexus_dir: str = "."
    nexus_force: bool = False
    nexus_exclude: str = ""
    nexus_max_size: int = Field(100, ge=0)
    resolve_strategy: Literal["prefix", "packaging"] = "prefix"
    upload_workers: int = Field(4, ge=1)
    follow_symlinks: bool = False

    # HTTP client
    http_timeout: float = 30.0
    http_verify: bool = True

    # Upload state store
    store_backend: Literal["sqlite", "mysql", "memory"] = "sqlite"
    nexus_db_path: str = "uploader_state.db"

    # MySQL store configuration, only read when store_backend == "mysql"
    db_host: str = "127.0.0.1"
    db_port: int = 3306
    db_name: str = "mavensync"
    db_user: str = "mavensync"
    db_password: str = ""
    db_charset: str = "utf8mb4"
    database_url: Optional[str] = None

    log_level: str = "INFO"

    @field_validator("nexus_snapshot_url", "nexus_username", "nexus_password", mode="before")
    @classmethod
    def _blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def exclude_keywords(self) -> List[str]:
        return [part.strip() for part in self.nexus_exclude.split(",") if part.strip()]

    @property
    def release_base_url(self) -> str:
        return _normalize_base(self.nexus_url)

    @property
    def snapshot_base_url(self) -> Optional[str]:
        if not self.nexus_snapshot_url:
            return None
        return _normalize_base(self.nexus_snapshot_url)

    @property
    def credentials(self) -> Optional[tuple[str, str]]:
        if self.nexus_username is None:
            return None
        return self.nexus_username, self.nexus_password or ""


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
