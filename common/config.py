from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv


logger = logging.getLogger(__name__)


def _default_env_file() -> str:
    return str(Path.cwd() / ".env")


def _env_int(name: str, default: int, *, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("[Config] %s=%r is not an integer, using %s", name, raw, default)
        return default
    if value < minimum:
        logger.warning("[Config] %s=%s below minimum %s, using %s", name, value, minimum, default)
        return default
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("[Config] %s=%r is not a number, using %s", name, raw, default)
        return default
    if value < 0:
        logger.warning("[Config] %s=%s is negative, using %s", name, value, default)
        return default
    return value


@dataclass(frozen=True)
class Settings:
    # None means no database: the API runs on the in-memory store.
    database_url: Optional[str] = None

    db_pool_size: int = 10
    db_max_overflow: int = 20
    db_pool_timeout: float = 5.0
    db_connect_retries: int = 5
    db_connect_retry_delay: float = 5.0

    default_limit: int = 100
    max_limit: int = 1000

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    cors_origins: Tuple[str, ...] = field(default_factory=lambda: ("http://localhost:3000",))
    log_level: str = "INFO"


def get_settings() -> Settings:
    # Load env file (if present) but still allow overriding via real environment variables.
    env_file = os.getenv("TIDELOGS_ENV_FILE", _default_env_file())
    if env_file and Path(env_file).exists():
        load_dotenv(env_file, override=False)

    database_url = os.getenv("DATABASE_URL", "").strip() or None

    max_limit = _env_int("LOGS_MAX_LIMIT", 1000, minimum=1)
    default_limit = _env_int("LOGS_DEFAULT_LIMIT", 100, minimum=1)
    if default_limit > max_limit:
        logger.warning(
            "[Config] LOGS_DEFAULT_LIMIT=%s exceeds LOGS_MAX_LIMIT=%s, clamping",
            default_limit,
            max_limit,
        )
        default_limit = max_limit

    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
    cors_origins = tuple(o.strip() for o in origins.split(",") if o.strip())

    return Settings(
        database_url=database_url,
        db_pool_size=_env_int("DB_POOL_SIZE", 10, minimum=1),
        db_max_overflow=_env_int("DB_MAX_OVERFLOW", 20),
        db_pool_timeout=_env_float("DB_POOL_TIMEOUT", 5.0),
        db_connect_retries=_env_int("DB_CONNECT_RETRIES", 5),
        db_connect_retry_delay=_env_float("DB_CONNECT_RETRY_DELAY", 5.0),
        default_limit=default_limit,
        max_limit=max_limit,
        api_host=os.getenv("API_HOST", "0.0.0.0").strip() or "0.0.0.0",
        api_port=_env_int("API_PORT", 8080, minimum=1),
        cors_origins=cors_origins,
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
