"""
db/connection.py
----------------
Builds the PostgreSQL connection pool and waits for the database to
accept connections at startup.
Uses psycopg2's ThreadedConnectionPool so request threads can share it.
"""

import time
from typing import Callable

import psycopg2
from psycopg2 import extensions, pool

from config import Settings
from utils.logger import get_logger

logger = get_logger(__name__)


class DatabaseUnavailable(Exception):
    """Raised when the database never answered during startup."""


def build_dsn(settings: Settings) -> str:
    """
    Assemble a libpq connection string from settings.

    An empty database name is left out so the server default applies.
    """
    return extensions.make_dsn(
        user=settings.db_user,
        password=settings.db_password,
        host=settings.db_host,
        port=settings.db_port,
        dbname=settings.db_name or None,
    )


def open_pool(settings: Settings) -> pool.ThreadedConnectionPool:
    """
    Open a thread-safe connection pool.

    Raises:
        psycopg2.OperationalError: If the database is unreachable.
    """
    return pool.ThreadedConnectionPool(
        settings.db_pool_min, settings.db_pool_max, build_dsn(settings)
    )


def ping(db_pool) -> bool:
    """Run `SELECT 1` on a pooled connection; report whether it worked."""
    try:
        conn = db_pool.getconn()
    except psycopg2.Error:
        return False
    try:
        with conn.cursor() as cur:
            cur.execute("SELECT 1;")
            cur.fetchone()
        conn.rollback()
        return True
    except psycopg2.Error:
        return False
    finally:
        db_pool.putconn(conn)


def wait_for_database(
    settings: Settings,
    connect: Callable[[Settings], pool.AbstractConnectionPool] = open_pool,
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Open the pool, retrying on a fixed interval until a ping succeeds.

    Args:
        settings: Connection and retry settings.
        connect: Pool factory.
        sleep: Called between attempts.

    Returns:
        A pool whose connections answered `SELECT 1`.

    Raises:
        DatabaseUnavailable: After `db_connect_attempts` failed attempts.
    """
    attempts = settings.db_connect_attempts
    for attempt in range(1, attempts + 1):
        try:
            db_pool = connect(settings)
        except psycopg2.OperationalError as e:
            logger.warning(f"Database not reachable (attempt {attempt}/{attempts}): {e}")
        else:
            if ping(db_pool):
                logger.info(f"Database reachable after {attempt} attempt(s).")
                return db_pool
            logger.warning(f"Database ping failed (attempt {attempt}/{attempts})")
            db_pool.closeall()

        if attempt < attempts:
            sleep(settings.db_connect_interval)

    raise DatabaseUnavailable(
        f"database at {settings.db_host}:{settings.db_port} unreachable "
        f"after {attempts} attempts"
    )
