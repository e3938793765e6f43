"""Environment-based configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from sqlalchemy.engine import URL

GLO_RESULT_URL = "https://www.glo.or.th/api/checking/getLotteryResult"


def resolve_database_url() -> str:
    """Resolve DB connection string.

    Priority:
      1) DATABASE_URL (explicit)
      2) Build from PG* env vars (common Postgres convention)
      3) Fallback to the local sqlite archive in ./data
    """

    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit

    host = os.getenv("PGHOST")
    user = os.getenv("PGUSER")
    database = os.getenv("PGDATABASE")
    port_raw = os.getenv("PGPORT")

    if host and user and database:
        try:
            port = int(port_raw) if port_raw else 5432
        except ValueError:
            port = 5432

        sslmode = os.getenv("PGSSLMODE", "require")
        url = URL.create(
            drivername="postgresql+psycopg2",
            username=user,
            password=os.getenv("PGPASSWORD"),
            host=host,
            port=port,
            database=database,
            query={"sslmode": sslmode} if sslmode else {},
        )
        return url.render_as_string(hide_password=False)

    return "sqlite:///./data/lottery.db"


def _float_from_env(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


def _int_from_env(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


@dataclass(frozen=True)
class BaseConfig:
    """Base configuration shared by all environments."""

    APP_ENV: str = os.getenv("APP_ENV", "development")
    DATABASE_URL: str = resolve_database_url()
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Remote source
    GLO_API_URL: str = os.getenv("GLO_API_URL", GLO_RESULT_URL)
    FETCH_TIMEOUT_SECONDS: float = _float_from_env("FETCH_TIMEOUT_SECONDS", 10.0)
    # Values below one second are clamped by the rate limiter.
    FETCH_MIN_INTERVAL_SECONDS: float = _float_from_env("FETCH_MIN_INTERVAL_SECONDS", 1.0)

    MAX_BATCH_SIZE: int = _int_from_env("MAX_BATCH_SIZE", 400)
    REPORT_PATH: str = os.getenv("REPORT_PATH", "reports")


@dataclass(frozen=True)
class DevelopmentConfig(BaseConfig):
    """Development configuration."""

    DEBUG: bool = True


@dataclass(frozen=True)
class ProductionConfig(BaseConfig):
    """Production configuration."""

    DEBUG: bool = False


def get_config() -> type[BaseConfig]:
    """Resolve configuration class based on APP_ENV."""

    env = os.getenv("APP_ENV", "development").lower().strip()
    if env == "production":
        return ProductionConfig
    return DevelopmentConfig
