"""
Database module for Courier
"""

from .connection import (
    dispose_database,
    get_async_engine,
    get_async_session,
    get_session_factory,
    init_database,
    session_scope,
    sync_schema,
)

__all__ = [
    "dispose_database",
    "get_async_engine",
    "get_async_session",
    "get_session_factory",
    "init_database",
    "session_scope",
    "sync_schema",
]
