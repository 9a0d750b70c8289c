from __future__ import annotations

import logging
import time
from typing import Callable

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings


logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> Engine:
    """Create the pooled engine shared by every request.

    The pool is sized from settings so that exhaustion fails fast
    (``pool_timeout``) instead of stalling the caller.
    """
    if not settings.database_url:
        raise ValueError("DATABASE_URL is not configured")

    url = make_url(settings.database_url)

    # Never log the password.
    logger.info(
        "[DB] Creating engine driver=%s host=%s port=%s db=%s user=%s pool_size=%s",
        url.drivername,
        url.host,
        url.port,
        url.database,
        url.username,
        settings.db_pool_size,
    )

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=300,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_timeout=settings.db_pool_timeout,
        future=True,
    )


def check_connection(engine: Engine) -> None:
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def connect_with_retry(
    settings: Settings,
    *,
    engine_factory: Callable[[Settings], Engine] = build_engine,
    sleep: Callable[[float], None] = time.sleep,
) -> Engine:
    """Build the engine and wait until the database answers ``SELECT 1``.

    Retries ``db_connect_retries`` times, ``db_connect_retry_delay`` seconds
    apart. The last failure is re-raised.
    """
    engine = engine_factory(settings)
    retries = settings.db_connect_retries

    while True:
        try:
            check_connection(engine)
            logger.info("[DB] Connection test OK")
            return engine
        except SQLAlchemyError as e:
            if retries <= 0:
                logger.error("[DB] Failed to connect to database after retries err=%s", type(e).__name__)
                engine.dispose()
                raise
            logger.warning(
                "[DB] Failed to connect to database, retrying... (%s attempts left)",
                retries,
            )
            retries -= 1
            sleep(settings.db_connect_retry_delay)
