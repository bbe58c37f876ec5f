"""Logging setup for processes embedding the persistence engine."""

from __future__ import annotations

import logging
import os
from typing import Final

from .errors import ConfigurationError

LOG_LEVEL_ENV: Final[str] = "POCKETSQL_LOG_LEVEL"
LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# SQLAlchemy logs bound parameters at INFO
SQLALCHEMY_ENGINE_LOGGER: Final[str] = "sqlalchemy.engine"


def resolve_log_level(level: int | str | None = None) -> int:
    """Resolve ``level`` (or ``POCKETSQL_LOG_LEVEL``, else INFO) to a numeric level."""

    if isinstance(level, int):
        return level
    name = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").strip().upper()
    try:
        return logging.getLevelNamesMapping()[name]
    except KeyError as exc:
        raise ConfigurationError(f"Unknown log level: {name!r}") from exc


def configure_logging(*, level: int | str | None = None, force: bool = False) -> None:
    """Initialise the root logger and keep SQLAlchemy from logging bound values.

    ``force=True`` replaces handlers that are already installed on the root logger.
    """

    logging.basicConfig(
        level=resolve_log_level(level),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
    logging.getLogger(SQLALCHEMY_ENGINE_LOGGER).setLevel(logging.WARNING)
