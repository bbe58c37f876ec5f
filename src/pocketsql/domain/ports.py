"""Ports the persistence facade depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .statements import ExecutionResult, ParsedStatement


@runtime_checkable
class StatementExecutor(Protocol):
    """Runs parsed statements against one already-open connection.

    Implementations never open or close the connection they were given.
    """

    def execute(
        self, statement: ParsedStatement, *, want_generated_keys: bool = False
    ) -> ExecutionResult: ...

    def execute_in_transaction(
        self, statements: Sequence[ParsedStatement], *, want_generated_keys: bool = False
    ) -> ExecutionResult: ...

    def query(self, statement: ParsedStatement) -> list[dict[str, Any]]: ...
