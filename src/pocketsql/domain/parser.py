"""Translation of input records into parameterised SQL statements.

Every operation is a pure function of the catalog, the entity name and the input, with one
exception kept for callers that read keys back from their own record: a missing primary key
is generated and written into the record it belongs to. The same keys are also reported in
``InsertPlan.generated_keys`` so callers never have to rely on the mutation.

Insert planning walks the record graph depth first. Each record yields its own INSERT before
any of its nested children are visited, so executing the plan front to back satisfies every
foreign key that points from a child to its parent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeAlias
from uuid import uuid4

from .errors import ValidationError
from .statements import GeneratedKey, InsertPlan, ParsedStatement
from .values import Record, RecordList, Scalar, classify

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from .catalog import EntityCatalog
    from .metadata import EntityDescriptor, FieldDescriptor
    from .values import InputRecord

KeyFactory: TypeAlias = "Callable[[], object]"

log = logging.getLogger(__name__)


def new_key() -> str:
    return str(uuid4())


@dataclass(frozen=True, slots=True)
class _Parent:
    descriptor: EntityDescriptor
    key_value: object


@dataclass(slots=True)
class _PlanBuilder:
    statements: list[ParsedStatement] = field(default_factory=list["ParsedStatement"])
    generated_keys: list[GeneratedKey] = field(default_factory=list["GeneratedKey"])

    def build(self) -> InsertPlan:
        return InsertPlan(tuple(self.statements), tuple(self.generated_keys))


class StatementParser:
    def __init__(self, catalog: EntityCatalog, *, key_factory: KeyFactory = new_key) -> None:
        self.catalog = catalog
        self._key_factory = key_factory

    def build_insert(self, entity: str, record: InputRecord) -> ParsedStatement:
        """Build one INSERT covering every declared field in descriptor order."""

        descriptor = self.catalog.get(entity)
        if descriptor.primary_key is not None:
            self._ensure_key(descriptor, descriptor.primary_key, record)
        return self._insert_statement(descriptor, record)

    def build_update(self, entity: str, record: Mapping[str, object]) -> ParsedStatement:
        """Build an UPDATE of the declared fields present in ``record``.

        The primary key is never assigned; its value is bound last, for the WHERE clause.
        """

        descriptor = self.catalog.get(entity)
        key = descriptor.require_primary_key()
        key_value = record.get(key.name)
        if key_value is None:
            raise ValidationError(f"missing key for update of entity '{entity}'")

        assigned = [
            item for item in descriptor.fields if not item.primary_key and item.name in record
        ]
        if not assigned:
            raise ValidationError(f"No fields provided to update for entity '{entity}'")

        assignments = ",".join(f"{item.column}=?" for item in assigned)
        parameters = [record[item.name] for item in assigned]
        parameters.append(key_value)
        return ParsedStatement(
            f"UPDATE {descriptor.table} SET {assignments} WHERE {key.column}=?",
            tuple(parameters),
        )

    def build_delete(self, entity: str, key_value: object) -> ParsedStatement:
        descriptor = self.catalog.get(entity)
        key = descriptor.require_primary_key()
        if key_value is None:
            raise ValidationError(f"missing key for delete of entity '{entity}'")
        return ParsedStatement(
            f"DELETE FROM {descriptor.table} WHERE {key.column}=?", (key_value,)
        )

    def build_select(
        self, entity: str, filters: Mapping[str, object] | None = None
    ) -> ParsedStatement:
        """Build a SELECT with one equality predicate per declared field named in ``filters``.

        Predicates follow descriptor order and are ANDed. Filter keys that name no declared
        field are ignored; no usable filter yields the unfiltered select.
        """

        descriptor = self.catalog.get(entity)
        base = f"SELECT * FROM {descriptor.table}"
        if not filters:
            return ParsedStatement(base)

        matched = [item for item in descriptor.fields if item.name in filters]
        if not matched:
            return ParsedStatement(base)
        predicates = " AND ".join(f"{item.column}=?" for item in matched)
        return ParsedStatement(
            f"{base} WHERE {predicates}", tuple(filters[item.name] for item in matched)
        )

    def build_select_by_id(self, entity: str, key_value: object) -> ParsedStatement:
        descriptor = self.catalog.get(entity)
        key = descriptor.require_primary_key()
        return ParsedStatement(
            f"SELECT * FROM {descriptor.table} WHERE {key.column}=?", (key_value,)
        )

    def build_insert_plan(self, entity: str, record: InputRecord) -> InsertPlan:
        """Build the ordered INSERT statements for ``record`` and everything nested in it."""

        builder = _PlanBuilder()
        self._plan(self.catalog.get(entity), record, parent=None, path=entity, builder=builder)
        plan = builder.build()
        log.debug(
            "Planned %d statements for entity '%s' (%d generated keys)",
            len(plan),
            entity,
            len(plan.generated_keys),
        )
        return plan

    def _plan(
        self,
        descriptor: EntityDescriptor,
        record: InputRecord,
        *,
        parent: _Parent | None,
        path: str,
        builder: _PlanBuilder,
    ) -> None:
        key = descriptor.require_primary_key()
        generated = self._ensure_key(descriptor, key, record)
        if generated is not None:
            builder.generated_keys.append(
                GeneratedKey(entity=descriptor.name, field=key.name, path=path, value=generated)
            )
        if parent is not None:
            self._link_to_parent(descriptor, record, parent)

        builder.statements.append(self._insert_statement(descriptor, record))

        current = _Parent(descriptor, record[key.name])
        for name, value in list(record.items()):
            if descriptor.declares(name):
                continue
            match classify(value):
                case Scalar():
                    continue
                case Record(record=child):
                    children = ((f"{path}.{name}", child),)
                case RecordList(records=items):
                    children = tuple(
                        (f"{path}.{name}[{index}]", item) for index, item in enumerate(items)
                    )

            if not self.catalog.is_child_of(descriptor, name):
                log.warning(
                    "Skipping nested value '%s' of entity '%s': not a known relation",
                    name,
                    descriptor.name,
                )
                continue

            child_descriptor = self.catalog.get(name)
            for child_path, child in children:
                self._plan(
                    child_descriptor, child, parent=current, path=child_path, builder=builder
                )

    def _ensure_key(
        self, descriptor: EntityDescriptor, key: FieldDescriptor, record: InputRecord
    ) -> object | None:
        """Generate the primary key when absent; return the generated value, if any."""

        if record.get(key.name) is not None:
            return None
        value = self._key_factory()
        record[key.name] = value
        log.debug("Generated primary key for entity '%s'", descriptor.name)
        return value

    @staticmethod
    def _link_to_parent(
        descriptor: EntityDescriptor, record: InputRecord, parent: _Parent
    ) -> None:
        foreign_key = descriptor.foreign_key_to(parent.descriptor)
        if foreign_key is not None and record.get(foreign_key.name) is None:
            record[foreign_key.name] = parent.key_value

    @staticmethod
    def _insert_statement(
        descriptor: EntityDescriptor, record: Mapping[str, object]
    ) -> ParsedStatement:
        missing = [
            item.name
            for item in descriptor.fields
            if not item.primary_key and not item.nullable and record.get(item.name) is None
        ]
        if missing:
            raise ValidationError(
                f"Required field '{missing[0]}' is null for entity '{descriptor.name}'"
            )

        columns = ",".join(item.column for item in descriptor.fields)
        placeholders = ",".join("?" for _ in descriptor.fields)
        return ParsedStatement(
            f"INSERT INTO {descriptor.table} ({columns}) VALUES ({placeholders})",
            tuple(record.get(item.name) for item in descriptor.fields),
        )
