"""Application configuration using pydantic settings with structured sections."""

from __future__ import annotations

import re
from datetime import timedelta
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

PROJECT_ROOT = Path(__file__).resolve().parents[2]

LogLevel = Literal["trace", "debug", "info", "warn", "warning", "error"]

_DURATION_UNITS = {"ms": timedelta(milliseconds=1), "s": timedelta(seconds=1), "m": timedelta(minutes=1)}
_DURATION_TOKEN = re.compile(r"(\d+)\s*(ms|s|m)?")
_DURATION_FULL = re.compile(r"\d+\s*(?:ms|s|m)?(?:\s+\d+\s*(?:ms|s|m)?)*")
_DURATION_EXAMPLES = "Examples: '5' (5 seconds), '3500ms', '30s', '2m', '1m 30s'"

# Flat environment names folded into their nested section: (flat, section, key).
_FLAT_NAMES = (("database_url", "database", "url"), ("port", "server", "port"))


def parse_duration(value: Any) -> timedelta:
    """Parse a duration given as whole seconds or a unit string.

    Strings may combine several values which are summed (``"1m 30s"``).
    A bare number is read as seconds. Negative values, fractions, exponents
    and infinity are rejected.
    """
    if isinstance(value, timedelta):
        if value < timedelta(0):
            raise ValueError("Duration cannot be negative")
        return value
    if isinstance(value, bool):
        raise ValueError("Expected a duration string or number")
    if isinstance(value, int):
        if value < 0:
            raise ValueError("Duration cannot be negative")
        return timedelta(seconds=value)
    if not isinstance(value, str):
        raise ValueError("Expected a duration string or number")

    text = value.strip().lower()
    if not _DURATION_FULL.fullmatch(text):
        raise ValueError(f"Invalid duration format '{value}'. {_DURATION_EXAMPLES}")

    total = timedelta(0)
    for match in _DURATION_TOKEN.finditer(text):
        amount, unit = match.groups()
        total += int(amount) * _DURATION_UNITS[unit or "s"]
    return total


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)


class DatabaseSettings(BaseModel):
    url: str
    echo: bool = False
    max_connections: int = Field(default=5, ge=1)
    run_migrations: bool = True
    migrations_dir: Path = Path("migrations")


class Settings(BaseSettings):
    """Top-level application settings with nested sections.

    Values are merged from ``config.toml``, ``.env`` and the process
    environment, later sources winning. Nested fields use ``__`` in
    environment variable names, e.g. ``DATABASE__URL``. The flat names
    ``DATABASE_URL`` and ``PORT`` are accepted as fallbacks for
    ``database.url`` and ``server.port``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        toml_file="config.toml",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "production"
    log_level: LogLevel = "info"
    project_name: str = "when-works"
    api_prefix: str = "/api"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings

    shutdown_timeout: timedelta = timedelta(seconds=8)
    request_timeout: timedelta = timedelta(seconds=10)

    session_secret: str = Field(..., min_length=16)

    web_dist_dir: Path = Path("web/dist")

    # Read from DATABASE_URL and PORT, then moved into their sections.
    flat_database_url: str | None = Field(default=None, validation_alias="database_url", exclude=True, repr=False)
    flat_port: str | int | None = Field(default=None, validation_alias="port", exclude=True, repr=False)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @model_validator(mode="before")
    @classmethod
    def _apply_flat_names(cls, data: Any) -> Any:
        """Use ``DATABASE_URL``/``PORT`` where the nested value is not set."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for flat, section, key in _FLAT_NAMES:
            value = data.pop(flat, None)
            if value is None:
                continue
            current = data.get(section)
            if isinstance(current, BaseModel):
                current = current.model_dump()
            merged = dict(current or {})
            merged.setdefault(key, value)
            data[section] = merged
        return data

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("shutdown_timeout", "request_timeout", mode="before")
    @classmethod
    def _parse_duration(cls, value: Any) -> timedelta:
        return parse_duration(value)

    @field_validator("api_prefix")
    @classmethod
    def _normalise_api_prefix(cls, value: str) -> str:
        stripped = value.strip().strip("/")
        if not stripped:
            raise ValueError("api_prefix must name a path segment, e.g. '/api'")
        return f"/{stripped}"

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def slow_request_threshold(self) -> timedelta:
        """Latency above which a response is logged as a warning."""
        if self.is_development:
            return timedelta(milliseconds=100)
        return timedelta(milliseconds=1000)

    @property
    def web_dist_path(self) -> Path:
        return resolve_project_path(self.web_dist_dir)

    @property
    def migrations_path(self) -> Path:
        return resolve_project_path(self.database.migrations_dir)


def resolve_project_path(path: Path) -> Path:
    if path.is_absolute():
        return path
    return (PROJECT_ROOT / path).resolve()


@lru_cache()
def get_settings() -> Settings:
    return Settings()
