"""Process-wide async engine.

Postgres (asyncpg) in production, SQLite (aiosqlite) under test. SQLite gets
its own locking setup so that concurrent writers queue like row locks would.
"""

import ssl
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.teamspace.core.config import get_settings

_engine: AsyncEngine | None = None


def is_sqlite_url(url: str) -> bool:
    return url.startswith("sqlite")


def postgres_ssl_context(mode: str) -> ssl.SSLContext | None:
    """TLS context for a libpq-style sslmode; None means plaintext."""
    if mode == "disable":
        return None
    context = ssl.create_default_context()
    if mode in ("prefer", "require"):
        # Encrypted but unauthenticated, as libpq does for these modes
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    else:
        context.check_hostname = mode == "verify-full"
        context.verify_mode = ssl.CERT_REQUIRED
    return context


def _connect_args(url: str) -> dict[str, Any]:
    settings = get_settings()
    if is_sqlite_url(url):
        return {"timeout": settings.database_busy_timeout_seconds}

    args: dict[str, Any] = {"statement_cache_size": settings.database_statement_cache_size}
    context = postgres_ssl_context(settings.database_ssl_mode)
    if context is not None:
        args["ssl"] = context
    return args


def configure_sqlite_locking(engine: AsyncEngine) -> None:
    """Make every SQLite transaction take the write lock up front.

    SQLite only waits on its busy timeout when a lock is acquired from an
    idle connection. A deferred transaction that upgrades from a read lock
    fails immediately with "database is locked", so transactions start with
    BEGIN IMMEDIATE and concurrent writers queue instead of erroring.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn: Any) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine_for_url(url: str, **kwargs: Any) -> AsyncEngine:
    """Create an async engine with driver-appropriate settings."""
    settings = get_settings()
    options: dict[str, Any] = {"connect_args": _connect_args(url), **kwargs}

    if not is_sqlite_url(url):
        options.setdefault("pool_size", settings.database_pool_size)
        options.setdefault("max_overflow", settings.database_max_overflow)
        options.setdefault("pool_pre_ping", True)

    engine = create_async_engine(url, **options)
    if is_sqlite_url(url):
        configure_sqlite_locking(engine)
    return engine


def get_engine() -> AsyncEngine:
    """Get or create the database engine singleton."""
    global _engine
    if _engine is None:
        _engine = create_engine_for_url(get_settings().database_url)
    return _engine


async def dispose_engine() -> None:
    """Dispose the database engine. Call during shutdown."""
    global _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
