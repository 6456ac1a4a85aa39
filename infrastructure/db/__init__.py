"""Database infrastructure helpers."""

from __future__ import annotations

from .connections import DatabaseConfig, create_connection
from .sessions import AsyncSessionFactory, get_session_factory, session_scope

__all__ = [
    "DatabaseConfig",
    "create_connection",
    "AsyncSessionFactory",
    "get_session_factory",
    "session_scope",
]
