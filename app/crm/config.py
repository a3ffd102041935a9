import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    env: str
    database_url: str
    log_level: str
    port: int

    statement_timeout_ms: int
    db_pool_size: int
    db_max_overflow: int


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from e


def normalize_database_url(url: str) -> str:
    """
    Point bare postgres URLs at the psycopg 3 driver.
    Hosting providers still hand out `postgres://`, which SQLAlchemy rejects.
    """
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        return "postgresql+psycopg://" + url[len("postgresql://"):]
    return url


def load_settings() -> Settings:
    raw_url = _getenv("DB_CONNECTION_URL") or _getenv("DATABASE_URL")
    return Settings(
        env=_getenv("ENV", "development").lower(),
        database_url=normalize_database_url(raw_url) if raw_url else "",
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        port=_getenv_int("PORT", 3322),
        statement_timeout_ms=_getenv_int("STATEMENT_TIMEOUT_MS", 0),
        db_pool_size=_getenv_int("DB_POOL_SIZE", 5),
        db_max_overflow=_getenv_int("DB_MAX_OVERFLOW", 10),
    )


def load_config() -> dict:
    s = load_settings()
    return {
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "LOG_LEVEL": s.log_level,
        "PORT": s.port,
        "STATEMENT_TIMEOUT_MS": s.statement_timeout_ms,
        "DB_POOL_SIZE": s.db_pool_size,
        "DB_MAX_OVERFLOW": s.db_max_overflow,
    }
