"""Entity catalogs shared by parser, executor and integration tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from itertools import count

from pocketsql.domain import EntityCatalog, EntityDescriptor, FieldDescriptor

CUSTOMER = EntityDescriptor(
    name="customer",
    table="customers",
    primary_key_column="id",
    fields=(
        FieldDescriptor.pk("id", "id", "TEXT"),
        FieldDescriptor.regular("name", "name", "TEXT", nullable=False),
        FieldDescriptor.regular("email", "email", "TEXT", nullable=True, unique=True),
    ),
)

ORDER = EntityDescriptor(
    name="order",
    table="orders",
    primary_key_column="id",
    fields=(
        FieldDescriptor.pk("id", "id", "TEXT"),
        FieldDescriptor.regular("total", "total", "NUMERIC", nullable=False),
    ),
)

LINEITEM = EntityDescriptor(
    name="lineitem",
    table="lineitems",
    primary_key_column="id",
    fields=(
        FieldDescriptor.pk("id", "id", "TEXT"),
        FieldDescriptor.fk("orderId", "order_id", "TEXT", "orders", "id"),
        FieldDescriptor.regular("sku", "sku", "TEXT", nullable=False, unique=True),
    ),
)

NOTE = EntityDescriptor(
    name="note",
    table="notes",
    primary_key_column="id",
    fields=(
        FieldDescriptor.pk("id", "id", "TEXT"),
        FieldDescriptor.fk("lineitemId", "lineitem_id", "TEXT", "lineitems", "id"),
        FieldDescriptor.regular("text", "text", "TEXT", nullable=False),
    ),
)

SHIPMENT = EntityDescriptor(
    name="shipment",
    table="shipments",
    primary_key_column="id",
    fields=(
        FieldDescriptor.pk("id", "id", "TEXT"),
        FieldDescriptor.fk("orderId", "order_id", "TEXT", "orders", "id"),
        FieldDescriptor.regular("carrier", "carrier", "TEXT", nullable=False),
    ),
)

SCHEMA: tuple[str, ...] = (
    "CREATE TABLE customers (id TEXT PRIMARY KEY, name TEXT NOT NULL, email TEXT UNIQUE)",
    "CREATE TABLE orders (id TEXT PRIMARY KEY, total NUMERIC NOT NULL)",
    "CREATE TABLE lineitems ("
    "id TEXT PRIMARY KEY, "
    "order_id TEXT NOT NULL REFERENCES orders(id), "
    "sku TEXT NOT NULL UNIQUE)",
    "CREATE TABLE notes ("
    "id TEXT PRIMARY KEY, "
    "lineitem_id TEXT NOT NULL REFERENCES lineitems(id), "
    "text TEXT NOT NULL)",
    "CREATE TABLE shipments ("
    "id TEXT PRIMARY KEY, "
    "order_id TEXT NOT NULL REFERENCES orders(id), "
    "carrier TEXT NOT NULL)",
)


def shop_catalog() -> EntityCatalog:
    return EntityCatalog.of(CUSTOMER, ORDER, LINEITEM, NOTE, SHIPMENT)


def sequential_keys(prefix: str = "key") -> Callable[[], str]:
    counter: Iterator[int] = count(1)
    return lambda: f"{prefix}-{next(counter)}"
