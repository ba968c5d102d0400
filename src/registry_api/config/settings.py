"""Registry configuration using pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import ClassVar, List, Literal, Optional

from pydantic import Field, PositiveInt
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_DB_PATH = PROJECT_ROOT / "var" / "data" / "registry.db"
DEFAULT_STORAGE_ROOT = PROJECT_ROOT / "var" / "registry" / "storage"


class RegistryApiSettings(BaseSettings):
    """Process/runtime settings for the registry API server."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="REGISTRY_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="127.0.0.1", description="Bind address for the registry API.")
    port: PositiveInt = Field(default=3025, description="Port for the registry API.")
    reload: bool = Field(default=False, description="Enable uvicorn auto-reload (dev only).")
    log_level: Literal["critical", "error", "warning", "info", "debug", "trace"] = Field(
        default="info",
        description="Log level for registry API / uvicorn.",
    )


class RegistrySettings(BaseSettings):
    """Validated settings for the registry storage and HTTP surface."""

    model_config: ClassVar[SettingsConfigDict] = SettingsConfigDict(
        env_prefix="REGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(
        default=f"sqlite+aiosqlite:///{DEFAULT_DB_PATH.as_posix()}",
        description="Async SQLAlchemy URL of the metadata store.",
    )
    storage_root: Path = Field(
        default=DEFAULT_STORAGE_ROOT,
        description="Directory holding crate tarballs.",
    )
    api_url: str = Field(
        default="http://127.0.0.1:3025",
        description="Public base URL of this registry, advertised in config.json.",
    )
    download_url: Optional[str] = Field(
        default=None,
        description="Download endpoint advertised in config.json (defaults to {api_url}/api/v1/crates).",
    )
    auth_required: bool = Field(
        default=False,
        description="Require a token for index reads and downloads.",
    )
    frontend_url: Optional[str] = Field(
        default=None,
        description="Token management page that /me redirects to.",
    )
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed by the CORS middleware.",
    )

    def resolved_download_url(self) -> str:
        if self.download_url:
            return self.download_url
        return f"{self.api_url.rstrip('/')}/api/v1/crates"


@lru_cache()
def get_settings() -> RegistrySettings:
    """Return memoized registry settings."""

    return RegistrySettings()


@lru_cache()
def get_api_settings() -> RegistryApiSettings:
    """Return memoized API process settings."""

    return RegistryApiSettings()
