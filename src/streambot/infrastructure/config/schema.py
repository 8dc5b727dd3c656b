"""Pydantic configuration models with validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    AliasPath,
    BaseModel,
    Field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["dev", "test", "prod"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]
LogFormat = Literal["json", "console"]


def _normalize_path(value: Any) -> Path:
    """Normalize a path-like value without filesystem side-effects."""
    if isinstance(value, Path):
        return value.expanduser()
    if isinstance(value, str):
        return Path(value).expanduser()
    raise TypeError(f"Expected path-like value, got: {type(value)!r}")


class AppConfig(BaseModel):
    """
    Canonical application configuration (validated, final).

    YAML is sectioned (proxy/http/anilist/logging/cache); environment
    variables are read by EnvOverrides so that load.py controls precedence:
    defaults < YAML < ENV < CLI.
    """

    # General
    app_name: str = Field(default="streambot", description="Application name.")
    environment: Environment = Field(
        default="dev",
        description="Runtime environment (affects defaults like log format).",
    )

    # Proxy (YAML section: proxy.*)
    proxy_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices(
            "proxy_enabled",
            AliasPath("proxy", "enabled"),
        ),
        description="Serve the iframe-unwrapping proxy and route links through it.",
    )
    proxy_host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices(
            "proxy_host",
            AliasPath("proxy", "host"),
        ),
        description="Bind host for the proxy listener.",
    )
    proxy_port: int = Field(
        default=3001,
        validation_alias=AliasChoices(
            "proxy_port",
            AliasPath("proxy", "port"),
        ),
        description="Bind port for the proxy listener.",
    )
    proxy_public_base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "proxy_public_base_url",
            AliasPath("proxy", "public_base_url"),
        ),
        description=(
            "Public base URL used when composing proxy links. "
            "If unset, derived as http://localhost:{proxy_port}."
        ),
    )

    # Extra (anime) providers as a JSON list
    anime_providers: Optional[str] = Field(
        default=None,
        description="JSON list of extra provider definitions.",
    )

    # HTTP (YAML section: http.*)
    http_timeout_seconds: float = Field(
        default=10.0,
        validation_alias=AliasChoices(
            "http_timeout_seconds",
            AliasPath("http", "timeout_seconds"),
        ),
        description="Timeout for metadata / id-mapping API calls.",
    )
    http_unwrap_timeout_seconds: float = Field(
        default=8.0,
        validation_alias=AliasChoices(
            "http_unwrap_timeout_seconds",
            AliasPath("http", "unwrap_timeout_seconds"),
        ),
        description="Per-fetch timeout while unwrapping embed iframes.",
    )
    http_user_agent: str = Field(
        default="StreamBot/1.0",
        validation_alias=AliasChoices(
            "http_user_agent",
            AliasPath("http", "user_agent"),
        ),
        description="User-Agent for API calls (unwrapping uses a browser UA).",
    )

    # External services
    tmdb_api_key: str | None = Field(
        default=None,
        description="TMDB API key (enables title lookup for anime links).",
    )
    anilist_endpoint: str = Field(
        default="https://graphql.anilist.co",
        validation_alias=AliasChoices(
            "anilist_endpoint",
            AliasPath("anilist", "endpoint"),
        ),
        description="AniList GraphQL endpoint.",
    )

    # Logging (YAML section: logging.*)
    log_level: LogLevel = Field(
        default="INFO",
        validation_alias=AliasChoices(
            "log_level",
            AliasPath("logging", "level"),
        ),
        description="Log level.",
    )
    log_format: Optional[LogFormat] = Field(
        default=None,
        validation_alias=AliasChoices(
            "log_format",
            AliasPath("logging", "format"),
        ),
        description=(
            "Log renderer format (console/json). If unset, derived from environment."
        ),
    )

    # Cache (YAML section: cache.*)
    cache_dir: Path = Field(
        default=Path("./.cache/streambot"),
        validation_alias=AliasChoices(
            "cache_dir",
            AliasPath("cache", "dir"),
        ),
        description="Lookup cache directory (diskcache).",
    )
    cache_ttl_seconds: int = Field(
        default=3600,
        validation_alias=AliasChoices(
            "cache_ttl_seconds",
            AliasPath("cache", "ttl_seconds"),
        ),
        description="Default lookup cache TTL in seconds.",
    )

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Path:
        return _normalize_path(v)

    @field_validator("http_timeout_seconds", "http_unwrap_timeout_seconds")
    @classmethod
    def _validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be > 0")
        return v

    @field_validator("proxy_port")
    @classmethod
    def _validate_port(cls, v: int) -> int:
        if not 0 < v < 65536:
            raise ValueError("proxy_port must be within 1..65535")
        return v

    @field_validator("cache_ttl_seconds")
    @classmethod
    def _validate_cache_ttl(cls, v: int) -> int:
        if v < 0:
            raise ValueError("cache_ttl_seconds must be >= 0")
        return v

    @model_validator(mode="after")
    def _derive_defaults(self) -> "AppConfig":
        # Default log format: console in dev/test, json in prod.
        if self.log_format is None:
            self.log_format = "json" if self.environment == "prod" else "console"
        if not self.proxy_public_base_url:
            self.proxy_public_base_url = f"http://localhost:{self.proxy_port}"
        self.proxy_public_base_url = self.proxy_public_base_url.rstrip("/")
        return self

    def to_sectioned_dict(self) -> dict[str, Any]:
        """Dump configuration in the sectioned shape used by config.yaml."""
        return {
            "app_name": self.app_name,
            "environment": self.environment,
            "proxy": {
                "enabled": self.proxy_enabled,
                "host": self.proxy_host,
                "port": self.proxy_port,
                "public_base_url": self.proxy_public_base_url,
            },
            "http": {
                "timeout_seconds": self.http_timeout_seconds,
                "unwrap_timeout_seconds": self.http_unwrap_timeout_seconds,
                "user_agent": self.http_user_agent,
            },
            "anilist": {"endpoint": self.anilist_endpoint},
            "logging": {"level": self.log_level, "format": self.log_format},
            "cache": {
                "dir": str(self.cache_dir),
                "ttl_seconds": self.cache_ttl_seconds,
            },
        }


class EnvOverrides(BaseSettings):
    """
    Environment-variable overrides (all optional).

    load.py creates EnvOverrides() to read STREAMBOT_* variables, merges the
    values that were set into YAML/defaults, then validates AppConfig.

    Supported env var examples (flat, explicit):
    - STREAMBOT_PROXY_ENABLED
    - STREAMBOT_PROXY_PORT
    - STREAMBOT_PROXY_PUBLIC_BASE_URL
    - STREAMBOT_ANIME_PROVIDERS
    - STREAMBOT_TMDB_API_KEY
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMBOT_",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: Optional[str] = None
    environment: Optional[Environment] = None

    proxy_enabled: Optional[bool] = None
    proxy_host: Optional[str] = None
    proxy_port: Optional[int] = None
    proxy_public_base_url: Optional[str] = None

    anime_providers: Optional[str] = None

    http_timeout_seconds: Optional[float] = None
    http_unwrap_timeout_seconds: Optional[float] = None
    http_user_agent: Optional[str] = None

    tmdb_api_key: Optional[str] = None
    anilist_endpoint: Optional[str] = None

    log_level: Optional[LogLevel] = None
    log_format: Optional[LogFormat] = None

    cache_dir: Optional[Path] = None
    cache_ttl_seconds: Optional[int] = None

    @field_validator("cache_dir", mode="before")
    @classmethod
    def _validate_paths(cls, v: Any) -> Any:
        if v is None:
            return None
        return _normalize_path(v)

    def to_update_dict(self) -> dict[str, Any]:
        """Return only values that were actually provided (non-None)."""
        return self.model_dump(exclude_none=True)
