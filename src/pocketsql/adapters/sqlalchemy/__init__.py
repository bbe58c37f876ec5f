"""SQLAlchemy adapter package."""

from __future__ import annotations

from .engine import StartupError, configured_engine, connect, is_started, shutdown, startup
from .executor import SqlAlchemyStatementExecutor, bind_statement

__all__ = [
    "SqlAlchemyStatementExecutor",
    "StartupError",
    "bind_statement",
    "configured_engine",
    "connect",
    "is_started",
    "shutdown",
    "startup",
]
