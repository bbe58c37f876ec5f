"""Process-wide SQLAlchemy engine lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import create_engine

from pocketsql.config.logging import configure_logging
from pocketsql.config.storage import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapter is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None

    def require_engine(self) -> Engine:
        if self.engine is None:
            raise StartupError(
                "SQLAlchemy adapter not initialised. Call pocketsql.adapters.sqlalchemy."
                "engine.startup() before requesting a connection."
            )
        return self.engine


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
    configure_logs: bool = False,
) -> Engine:
    """Initialise the engine used by ``connect``; pass ``force=True`` to replace it.

    Without ``engine`` or ``database_uri`` the URI comes from ``get_database_config``.
    ``configure_logs=True`` also sets up root logging for processes that own no logging
    configuration of their own.
    """

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    if configure_logs:
        configure_logging()

    resolved_engine = engine or create_engine(database_uri or get_database_config().uri)
    if _STATE.engine is not None and _STATE.engine is not resolved_engine:
        _STATE.engine.dispose()
    _STATE.engine = resolved_engine
    log.info("SQLAlchemy adapter started for %s", resolved_engine.url.render_as_string())
    return resolved_engine


def configured_engine() -> Engine | None:
    """Return the engine currently managed by the adapter (if any)."""

    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None


def connect() -> Connection:
    """Open a new connection on the configured engine; the caller closes it."""

    return _STATE.require_engine().connect()
