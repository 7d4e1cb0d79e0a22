from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
import os
from urllib.parse import quote


def _default_database_url() -> str:
    """Compose a Postgres URL from the discrete ``DB_*`` variables."""
    user = quote(os.getenv("DB_USER", "classroom"), safe="")
    password = quote(os.getenv("DB_PASSWORD", "classroom"), safe="")
    host = os.getenv("DB_HOST", "postgres")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME", "classroom")
    return f"postgres://{user}:{password}@{host}:{port}/{name}?sslmode=disable"


def _split_origins(raw: str) -> tuple[str, ...]:
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


@dataclass(frozen=True)
class Settings:
    """Runtime configuration values exposed to FastAPI components."""

    app_name: str = os.getenv("APP_NAME", "classroom-service")
    version: str = "0.1.0"
    database_url: str = os.getenv("POSTGRES_URL") or _default_database_url()
    db_pool_min_size: int = int(os.getenv("DB_POOL_MIN_SIZE", "1"))
    db_pool_max_size: int = int(os.getenv("DB_POOL_MAX_SIZE", "10"))
    http_host: str = os.getenv("HTTP_HOST", "0.0.0.0")
    http_port: int = int(os.getenv("HTTP_PORT", "8000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: _split_origins(
            os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
        )
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached Settings instance for the running process."""
    return Settings()
