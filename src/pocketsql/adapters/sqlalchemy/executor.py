"""Statement executor running parsed statements on a SQLAlchemy ``Connection``."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from pocketsql.domain.errors import ExecutionError
from pocketsql.domain.statements import ExecutionResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.engine import Connection, CursorResult, RootTransaction
    from sqlalchemy.sql.elements import TextClause

    from pocketsql.domain.statements import ParsedStatement

log = logging.getLogger(__name__)

AUTOCOMMIT: Final[str] = "AUTOCOMMIT"


def bind_statement(statement: ParsedStatement) -> tuple[TextClause, dict[str, object]]:
    """Turn positional ``?`` markers into named ``:pN`` binds for ``sqlalchemy.text``.

    SQLAlchemy then renders the binds in whatever paramstyle the connection's driver uses.
    """

    head, *tail = statement.sql.split("?")
    sql = head + "".join(f":p{index}{part}" for index, part in enumerate(tail, 1))
    parameters = {f"p{index}": value for index, value in enumerate(statement.parameters, 1)}
    return text(sql), parameters


class SqlAlchemyStatementExecutor:
    """Bind and run statements on a connection owned by the caller.

    The executor never opens, closes or shares the connection. ``execute`` runs inside
    whatever transaction the connection is in (committing immediately only when the
    connection is in ``AUTOCOMMIT`` mode); ``execute_in_transaction`` owns a transaction of
    its own and refuses a connection that is already in one.
    """

    def __init__(self, connection: Connection) -> None:
        self.connection = connection

    def execute(
        self, statement: ParsedStatement, *, want_generated_keys: bool = False
    ) -> ExecutionResult:
        affected, key = self._run(statement, want_generated_keys=want_generated_keys)
        return ExecutionResult(affected_rows=affected, generated_keys=() if key is None else (key,))

    def execute_in_transaction(
        self, statements: Sequence[ParsedStatement], *, want_generated_keys: bool = False
    ) -> ExecutionResult:
        """Run ``statements`` in order inside one transaction.

        Any failure, including a failed commit, rolls back every statement already run and
        re-raises. The connection's auto-commit mode is restored on every exit path; when
        restoring fails while an error is already propagating, the original error wins.
        """

        autocommit = self._autocommit_enabled()
        if self.connection.in_transaction():
            if not autocommit:
                raise ExecutionError("connection already has an active transaction")
            # statements already ran in autocommit; close the logical transaction only
            self.connection.commit()

        if autocommit:
            self._set_autocommit(enabled=False)
        try:
            result = self._run_transaction(statements, want_generated_keys=want_generated_keys)
        except BaseException:
            if autocommit:
                self._restore_autocommit_after_failure()
            raise
        if autocommit:
            self._set_autocommit(enabled=True)
        return result

    def query(self, statement: ParsedStatement) -> list[dict[str, Any]]:
        """Run a SELECT and return its rows as column to value mappings."""

        started = not self.connection.in_transaction()
        try:
            result = self._send(statement)
            return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as exc:
            raise ExecutionError(f"Query failed: {exc}", statement=statement) from exc
        finally:
            if started and self.connection.in_transaction():
                self.connection.rollback()

    def _run_transaction(
        self, statements: Sequence[ParsedStatement], *, want_generated_keys: bool
    ) -> ExecutionResult:
        transaction = self.connection.begin()
        affected_rows = 0
        keys: list[object] = []
        try:
            for index, statement in enumerate(statements):
                affected, key = self._run(
                    statement, want_generated_keys=want_generated_keys, index=index
                )
                affected_rows += affected
                if key is not None:
                    keys.append(key)
            self._commit(transaction)
        except BaseException:
            log.warning("Rolling back transaction of %d statements", len(statements))
            self._discard(transaction)
            raise

        log.debug(
            "Committed %d statements: affected_rows=%d, generated_keys=%d",
            len(statements),
            affected_rows,
            len(keys),
        )
        return ExecutionResult(affected_rows=affected_rows, generated_keys=tuple(keys))

    def _discard(self, transaction: RootTransaction) -> None:
        """Roll back ``transaction`` and detach it from the connection.

        A failed commit leaves the transaction deactivated but still attached, while the
        driver connection keeps its own transaction open. Both are cleared here.
        """

        commit_failed = not transaction.is_active
        try:
            transaction.rollback()
            if commit_failed:
                self.connection.connection.rollback()
        except Exception:
            log.exception("Rollback failed; the original error is re-raised")

    def _run(
        self,
        statement: ParsedStatement,
        *,
        want_generated_keys: bool,
        index: int | None = None,
    ) -> tuple[int, object | None]:
        result = self._send(statement, index=index)
        affected = max(result.rowcount, 0)
        key = result.lastrowid if want_generated_keys and statement.is_insert else None
        return affected, key

    def _send(self, statement: ParsedStatement, *, index: int | None = None) -> CursorResult[Any]:
        clause, parameters = bind_statement(statement)
        log.debug("Executing %s", statement.sql)
        try:
            return self.connection.execute(clause, parameters)
        except SQLAlchemyError as exc:
            raise ExecutionError(
                f"Statement failed: {exc}", statement=statement, index=index
            ) from exc

    @staticmethod
    def _commit(transaction: RootTransaction) -> None:
        try:
            transaction.commit()
        except SQLAlchemyError as exc:
            raise ExecutionError(f"Commit failed: {exc}") from exc

    def _autocommit_enabled(self) -> bool:
        options = self.connection.get_execution_options()
        return options.get("isolation_level") == AUTOCOMMIT

    def _set_autocommit(self, *, enabled: bool) -> None:
        level = AUTOCOMMIT if enabled else self.connection.default_isolation_level
        self.connection.execution_options(isolation_level=level)

    def _restore_autocommit_after_failure(self) -> None:
        try:
            self._set_autocommit(enabled=True)
        except Exception:
            log.exception("Could not restore auto-commit mode after a failed transaction")
