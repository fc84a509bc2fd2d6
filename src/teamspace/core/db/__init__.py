"""Database utilities - engine and sessions."""

from src.teamspace.core.db.engine import (
    configure_sqlite_locking,
    create_engine_for_url,
    dispose_engine,
    get_engine,
)
from src.teamspace.core.db.session import create_session_factory, get_session

__all__ = [
    # Engine
    "configure_sqlite_locking",
    "create_engine_for_url",
    "dispose_engine",
    "get_engine",
    # Session
    "create_session_factory",
    "get_session",
]
