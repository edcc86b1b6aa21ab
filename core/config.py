"""Dataclass-based service configuration.

Settings are a frozen dataclass with sensible defaults, overridable from
environment variables. Everything that used to be read from ``os.environ``
at import time (database path, CORS origins, SQL echo) lives here so the
application and the store can be constructed explicitly.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path


def _bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """Complete configuration for the book service.

    Usage::

        settings = Settings.from_env()
        database = Database.from_settings(settings)
    """

    database_path: Path = Path("data") / "books.db"
    database_url_override: str | None = None
    echo_sql: bool = False

    cors_origins: tuple[str, ...] = field(
        default=("http://localhost:3000", "http://localhost:3001")
    )
    debug: bool = False

    log_level: str = "INFO"
    log_json: bool = False

    service_name: str = "books-api"
    otel_endpoint: str | None = None

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the store (sqlite file unless overridden)."""
        if self.database_url_override:
            return self.database_url_override
        return f"sqlite+aiosqlite:///{self.database_path}"

    @classmethod
    def default(cls) -> "Settings":
        """Create settings with all defaults."""
        return cls()

    @classmethod
    def from_env(cls, prefix: str = "BOOKS_") -> "Settings":
        """Create settings from environment variables.

        Example: BOOKS_DATABASE_PATH=/var/lib/books/books.db
        """
        overrides: dict = {}

        db_path = os.getenv(f"{prefix}DATABASE_PATH")
        if db_path:
            overrides["database_path"] = Path(db_path)
        db_url = os.getenv(f"{prefix}DATABASE_URL")
        if db_url:
            overrides["database_url_override"] = db_url
        overrides["echo_sql"] = _bool(os.getenv(f"{prefix}DB_ECHO"))

        origins = os.getenv(f"{prefix}CORS_ORIGINS")
        if origins:
            overrides["cors_origins"] = tuple(
                o.strip() for o in origins.split(",") if o.strip()
            )
        overrides["debug"] = _bool(os.getenv(f"{prefix}DEBUG"))

        level = os.getenv(f"{prefix}LOG_LEVEL")
        if level:
            overrides["log_level"] = level.upper()
        overrides["log_json"] = _bool(os.getenv(f"{prefix}LOG_JSON"))

        service_name = os.getenv(f"{prefix}SERVICE_NAME")
        if service_name:
            overrides["service_name"] = service_name
        overrides["otel_endpoint"] = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or None

        return cls(**overrides)
