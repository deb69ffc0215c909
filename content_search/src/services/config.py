"""Application configuration helpers."""

from __future__ import annotations

from functools import lru_cache
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_CACHE_DB_PATH = PROJECT_ROOT / "data" / "content_cache.db"
DEFAULT_CONTENT_DIRECTORIES = ("blog", "portfolio", "projects")
DEFAULT_STANDALONE_PAGES = ("about.md",)


def _split_csv(value: object) -> object:
    if isinstance(value, str):
        return [part.strip().strip("/") for part in value.split(",") if part.strip().strip("/")]
    return value


class AppConfig(BaseModel):
    """Runtime configuration loaded from environment variables."""

    model_config = ConfigDict(frozen=True)

    github_token: Optional[str] = Field(
        default=None,
        description="Token for the content repository (required by every API route)",
    )
    github_repo: str = Field(default="", description="Content repository as owner/name")
    github_branch: str = Field(default="main", description="Branch the content is read from")
    github_api_base: str = Field(default="https://api.github.com")
    content_path: str = Field(
        default="src/content",
        description="Repository directory holding the content tree",
    )
    content_directories: tuple[str, ...] = Field(
        default=DEFAULT_CONTENT_DIRECTORIES,
        description="Top-level content directories that are indexed",
    )
    standalone_pages: tuple[str, ...] = Field(
        default=DEFAULT_STANDALONE_PAGES,
        description="Single markdown files at the content root that are indexed",
    )
    cache_db_path: Path = Field(default=DEFAULT_CACHE_DB_PATH)
    cache_ttl_seconds: int = Field(default=1800, ge=1, description="Cache generation validity")
    cache_retention_seconds: int = Field(
        default=86400,
        ge=1,
        description="How long a generation is kept for stale fallback",
    )
    index_batch_size: int = Field(default=10, ge=1, description="Files fetched concurrently")
    request_timeout_seconds: float = Field(default=15.0, gt=0)

    @field_validator("github_token", mode="before")
    @classmethod
    def _blank_token_is_missing(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        cleaned = value.strip()
        return cleaned or None

    @field_validator("content_directories", "standalone_pages", mode="before")
    @classmethod
    def _parse_list(cls, value: object) -> object:
        return _split_csv(value)

    @field_validator("content_path", mode="before")
    @classmethod
    def _normalize_content_path(cls, value: Optional[str]) -> str:
        return (value or "").strip().strip("/")

    @field_validator("github_api_base", mode="before")
    @classmethod
    def _normalize_api_base(cls, value: Optional[str]) -> str:
        return (value or "https://api.github.com").rstrip("/")

    @field_validator("cache_db_path", mode="before")
    @classmethod
    def _normalize_db_path(cls, value: str | Path) -> Path:
        path = value if isinstance(value, Path) else Path(value)
        return path.expanduser().resolve()

    @model_validator(mode="after")
    def _retention_outlives_ttl(self) -> "AppConfig":
        if self.cache_retention_seconds < self.cache_ttl_seconds:
            raise ValueError("CACHE_RETENTION_SECONDS must be >= CACHE_TTL_SECONDS")
        return self


def _read_env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(key, default)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Load and cache application configuration."""
    return AppConfig(
        github_token=_read_env("GITHUB_TOKEN"),
        github_repo=_read_env("GITHUB_REPO", ""),
        github_branch=_read_env("GITHUB_BRANCH", "main"),
        github_api_base=_read_env("GITHUB_API_BASE", "https://api.github.com"),
        content_path=_read_env("CONTENT_PATH", "src/content"),
        content_directories=_read_env("CONTENT_DIRECTORIES", ",".join(DEFAULT_CONTENT_DIRECTORIES)),
        standalone_pages=_read_env("CONTENT_STANDALONE_PAGES", ",".join(DEFAULT_STANDALONE_PAGES)),
        cache_db_path=_read_env("CACHE_DB_PATH", str(DEFAULT_CACHE_DB_PATH)),
        cache_ttl_seconds=_read_env("CACHE_TTL_SECONDS", "1800"),
        cache_retention_seconds=_read_env("CACHE_RETENTION_SECONDS", "86400"),
        index_batch_size=_read_env("INDEX_BATCH_SIZE", "10"),
        request_timeout_seconds=_read_env("SOURCE_TIMEOUT_SECONDS", "15"),
    )


def reload_config() -> AppConfig:
    """Clear cached config (useful for tests) and reload."""
    get_config.cache_clear()
    return get_config()


__all__ = ["AppConfig", "get_config", "reload_config", "PROJECT_ROOT", "DEFAULT_CACHE_DB_PATH"]
