from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from pocketsql.adapters.sqlalchemy import (
    StartupError,
    configured_engine,
    connect,
    is_started,
    shutdown,
    startup,
)
from pocketsql.config import MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _reset(reset_adapter_state: None) -> Iterator[None]:
    _ = reset_adapter_state
    yield


def test_connect_requires_startup() -> None:
    with pytest.raises(StartupError):
        connect()


def test_startup_requires_force_for_reconfiguration() -> None:
    engine_a = create_engine("sqlite+pysqlite:///:memory:")
    engine_b = create_engine("sqlite+pysqlite:///:memory:")

    startup(engine=engine_a)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_startup_uses_database_uri_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "sqlite+pysqlite:///:memory:")

    engine = startup()

    assert engine.url.database == ":memory:"
    assert is_started()


def test_connect_opens_fresh_connections() -> None:
    startup(database_uri="sqlite+pysqlite:///:memory:")

    with connect() as first, connect() as second:
        assert first is not second
        assert first.exec_driver_sql("SELECT 1").scalar_one() == 1


def test_shutdown_resets_state() -> None:
    startup(database_uri="sqlite+pysqlite:///:memory:")

    shutdown()

    assert configured_engine() is None
    assert not is_started()


def test_startup_requires_database_uri_when_fallback_disabled(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)
    monkeypatch.setenv("POCKETSQL_REQUIRE_DATABASE_URI", "true")

    with pytest.raises(MissingConfigurationError):
        startup()

    assert not is_started()


def test_startup_can_configure_logging() -> None:
    engine_logger = logging.getLogger("sqlalchemy.engine")
    previous = engine_logger.level
    engine_logger.setLevel(logging.INFO)
    try:
        startup(database_uri="sqlite+pysqlite:///:memory:", configure_logs=True)

        assert engine_logger.level == logging.WARNING
    finally:
        engine_logger.setLevel(previous)
