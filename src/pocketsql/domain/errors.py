"""Error taxonomy raised by the persistence engine."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pocketsql.config.errors import ConfigurationError

if TYPE_CHECKING:
    from .statements import ParsedStatement


class PersistenceError(Exception):
    """Base class for errors raised while planning or executing statements."""


class NotFoundError(PersistenceError, LookupError):
    """Raised when an entity name is not registered in the catalog."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"Unknown entity '{entity}'")
        self.entity = entity


class ValidationError(PersistenceError, ValueError):
    """Raised when an input record cannot be turned into a statement."""


class ExecutionError(PersistenceError):
    """Raised when the backend rejects a statement or a transaction cannot complete."""

    def __init__(
        self,
        message: str,
        *,
        statement: ParsedStatement | None = None,
        index: int | None = None,
    ) -> None:
        super().__init__(message)
        self.statement = statement
        self.index = index


__all__ = [
    "ConfigurationError",
    "ExecutionError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
]
