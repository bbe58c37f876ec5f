"""Application entry points: one connection and one transaction per call."""

from __future__ import annotations

from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING, Any

from pocketsql.adapters.sqlalchemy import SqlAlchemyStatementExecutor, connect
from pocketsql.domain import PersistenceService, StatementParser

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from sqlalchemy.engine import Engine

    from pocketsql.domain import EntityCatalog, ExecutionResult
    from pocketsql.domain.values import InputRecord


log = getLogger(__name__)


@contextmanager
def persistence_service(
    catalog: EntityCatalog, *, engine: Engine | None = None
) -> Iterator[PersistenceService]:
    """Yield a facade bound to a fresh connection, closed when the block exits.

    Without ``engine`` the connection comes from the adapter configured by
    ``pocketsql.adapters.sqlalchemy.startup``.
    """

    connection = engine.connect() if engine is not None else connect()
    try:
        yield PersistenceService(
            parser=StatementParser(catalog),
            executor=SqlAlchemyStatementExecutor(connection),
        )
    finally:
        connection.close()


def persist_record(
    catalog: EntityCatalog,
    entity: str,
    record: InputRecord,
    *,
    engine: Engine | None = None,
) -> ExecutionResult:
    """Insert ``record`` and every nested child record in one transaction."""

    with persistence_service(catalog, engine=engine) as service:
        result = service.persist(entity, record)
    log.info(
        "Finished persist of '%s': affected_rows=%s, assigned_keys=%s",
        entity,
        result.affected_rows,
        len(result.assigned_keys),
    )
    return result


def update_record(
    catalog: EntityCatalog,
    entity: str,
    record: Mapping[str, object],
    *,
    engine: Engine | None = None,
) -> ExecutionResult:
    with persistence_service(catalog, engine=engine) as service:
        return service.update(entity, record)


def delete_record(
    catalog: EntityCatalog,
    entity: str,
    key_value: object,
    *,
    engine: Engine | None = None,
) -> ExecutionResult:
    with persistence_service(catalog, engine=engine) as service:
        return service.delete(entity, key_value)


def find_records(
    catalog: EntityCatalog,
    entity: str,
    filters: Mapping[str, object] | None = None,
    *,
    engine: Engine | None = None,
) -> list[dict[str, Any]]:
    with persistence_service(catalog, engine=engine) as service:
        return service.find(entity, filters)
