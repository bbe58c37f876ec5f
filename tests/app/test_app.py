from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pocketsql.adapters.sqlalchemy import StartupError, startup
from pocketsql.app import delete_record, find_records, persist_record, update_record
from pocketsql.domain import ExecutionError, NotFoundError
from tests.helpers.catalogs import SCHEMA, shop_catalog
from tests.helpers.schema import count_rows, create_tables

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


@pytest.fixture
def shop_engine(sqlite_engine: Engine) -> Engine:
    with sqlite_engine.connect() as connection:
        create_tables(connection, SCHEMA)
    return sqlite_engine


def test_persist_and_find_with_explicit_engine(shop_engine: Engine) -> None:
    catalog = shop_catalog()
    record: dict[str, object] = {"total": 10, "lineitem": [{"sku": "X1"}]}

    result = persist_record(catalog, "order", record, engine=shop_engine)

    assert result.affected_rows == 2
    assert [key.path for key in result.assigned_keys] == ["order", "order.lineitem[0]"]
    items = find_records(catalog, "lineitem", {"orderId": record["id"]}, engine=shop_engine)
    assert [item["sku"] for item in items] == ["X1"]


def test_update_and_delete_with_explicit_engine(shop_engine: Engine) -> None:
    catalog = shop_catalog()
    record: dict[str, object] = {"name": "Bo"}
    persist_record(catalog, "customer", record, engine=shop_engine)

    updated = update_record(
        catalog, "customer", {"id": record["id"], "email": "bo@example.com"}, engine=shop_engine
    )
    assert updated.affected_rows == 1
    assert find_records(catalog, "customer", engine=shop_engine) == [
        {"id": record["id"], "name": "Bo", "email": "bo@example.com"}
    ]

    deleted = delete_record(catalog, "customer", record["id"], engine=shop_engine)
    assert deleted.affected_rows == 1
    assert find_records(catalog, "customer", engine=shop_engine) == []


def test_failed_persist_leaves_database_untouched(shop_engine: Engine) -> None:
    catalog = shop_catalog()

    with pytest.raises(ExecutionError):
        persist_record(
            catalog,
            "order",
            {"total": 5, "lineitem": [{"sku": "S"}, {"sku": "S"}]},
            engine=shop_engine,
        )

    with shop_engine.connect() as connection:
        assert count_rows(connection, "orders") == 0
        assert count_rows(connection, "lineitems") == 0


def test_unknown_entity_raises_not_found(shop_engine: Engine) -> None:
    with pytest.raises(NotFoundError):
        find_records(shop_catalog(), "invoice", engine=shop_engine)


@pytest.mark.usefixtures("reset_adapter_state")
def test_entry_points_use_started_adapter(shop_engine: Engine) -> None:
    startup(engine=shop_engine)
    catalog = shop_catalog()
    record: dict[str, object] = {"total": 3, "shipment": {"carrier": "DHL"}}

    persist_record(catalog, "order", record)

    shipments = find_records(catalog, "shipment", {"orderId": record["id"]})
    assert [row["carrier"] for row in shipments] == ["DHL"]


@pytest.mark.usefixtures("reset_adapter_state")
def test_entry_points_require_startup_without_engine() -> None:
    with pytest.raises(StartupError):
        find_records(shop_catalog(), "order")
