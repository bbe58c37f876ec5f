"""Domain core: entity metadata, statement planning and the persistence facade."""

from __future__ import annotations

from .catalog import EntityCatalog
from .errors import (
    ConfigurationError,
    ExecutionError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from .metadata import EntityDescriptor, FieldDescriptor, ForeignKeyRef
from .parser import StatementParser, new_key
from .persistence import PersistenceService
from .ports import StatementExecutor
from .statements import ExecutionResult, GeneratedKey, InsertPlan, ParsedStatement
from .values import Record, RecordList, Scalar, classify

__all__ = [
    "ConfigurationError",
    "EntityCatalog",
    "EntityDescriptor",
    "ExecutionError",
    "ExecutionResult",
    "FieldDescriptor",
    "ForeignKeyRef",
    "GeneratedKey",
    "InsertPlan",
    "NotFoundError",
    "ParsedStatement",
    "PersistenceError",
    "PersistenceService",
    "Record",
    "RecordList",
    "Scalar",
    "StatementExecutor",
    "StatementParser",
    "ValidationError",
    "classify",
    "new_key",
]
