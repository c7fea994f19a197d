"""
db/connection.py
-----------------
psycopg2 ThreadedConnectionPool for the event catalog database.

Usage:
    from racetrip.db.connection import get_conn

    with get_conn() as conn:
        with conn.cursor() as cur:
            cur.execute("SELECT 1")

The catalog is read-only to this service, so the context manager only
rolls back on error (no commit) before returning the connection.

Environment variables (set in config.py):
    POSTGRES_HOST / POSTGRES_PORT / POSTGRES_DB
    POSTGRES_USER / POSTGRES_PASSWORD
    POSTGRES_MIN_CONN / POSTGRES_MAX_CONN
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

import psycopg2
import psycopg2.pool

from racetrip import config

_pool: psycopg2.pool.ThreadedConnectionPool | None = None


def get_pool() -> psycopg2.pool.ThreadedConnectionPool:
    """Return the singleton connection pool, creating it on first call."""
    global _pool
    if _pool is None or _pool.closed:
        _pool = psycopg2.pool.ThreadedConnectionPool(
            minconn=config.POSTGRES_MIN_CONN,
            maxconn=config.POSTGRES_MAX_CONN,
            host=config.POSTGRES_HOST,
            port=config.POSTGRES_PORT,
            dbname=config.POSTGRES_DB,
            user=config.POSTGRES_USER,
            password=config.POSTGRES_PASSWORD,
        )
    return _pool


@contextmanager
def get_conn() -> Generator:
    """Borrow a connection; roll back on exception; always return it."""
    pool = get_pool()
    conn = pool.getconn()
    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    finally:
        pool.putconn(conn)


def close_pool() -> None:
    """Close all connections in the pool (call at application shutdown)."""
    global _pool
    if _pool and not _pool.closed:
        _pool.closeall()
    _pool = None
