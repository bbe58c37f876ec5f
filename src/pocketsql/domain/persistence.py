"""Persistence facade composing the statement parser with an executor."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .parser import StatementParser
    from .ports import StatementExecutor
    from .statements import ExecutionResult
    from .values import InputRecord

log = logging.getLogger(__name__)


@dataclass(slots=True)
class PersistenceService:
    """Persist record graphs all-or-nothing.

    A record graph either ends up fully committed or leaves no trace: the whole insert plan
    runs inside one transaction on the executor's connection.
    """

    parser: StatementParser
    executor: StatementExecutor

    def persist(self, entity: str, record: InputRecord) -> ExecutionResult:
        plan = self.parser.build_insert_plan(entity, record)
        result = self.executor.execute_in_transaction(plan, want_generated_keys=True)
        log.info(
            "Persisted entity '%s': statements=%d, affected_rows=%d",
            entity,
            len(plan),
            result.affected_rows,
        )
        return replace(result, assigned_keys=plan.generated_keys)

    def update(self, entity: str, record: Mapping[str, object]) -> ExecutionResult:
        statement = self.parser.build_update(entity, record)
        return self.executor.execute_in_transaction([statement])

    def delete(self, entity: str, key_value: object) -> ExecutionResult:
        statement = self.parser.build_delete(entity, key_value)
        return self.executor.execute_in_transaction([statement])

    def find(
        self, entity: str, filters: Mapping[str, object] | None = None
    ) -> list[dict[str, Any]]:
        return self.executor.query(self.parser.build_select(entity, filters))

    def find_by_id(self, entity: str, key_value: object) -> dict[str, Any] | None:
        rows = self.executor.query(self.parser.build_select_by_id(entity, key_value))
        return rows[0] if rows else None
