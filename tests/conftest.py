from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Connection, Engine  # noqa: TC002
from sqlalchemy.pool import StaticPool

from pocketsql.adapters.sqlalchemy import shutdown

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_connection(sqlite_engine: Engine) -> Iterator[Connection]:
    connection = sqlite_engine.connect()
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture
def reset_adapter_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()
