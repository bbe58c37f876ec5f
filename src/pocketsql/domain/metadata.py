"""Static entity-to-table mapping descriptors.

Descriptors are plain frozen values supplied by a metadata source at load time. They carry
no behaviour beyond validating their own invariants; lookup lives in the catalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from pocketsql.config.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ForeignKeyRef:
    """Referenced table and column of a foreign-key field."""

    table: str
    column: str

    def __post_init__(self) -> None:
        if not self.table or not self.column:
            raise ConfigurationError("foreign key must name both a table and a column")


@dataclass(frozen=True, slots=True, kw_only=True)
class FieldDescriptor:
    name: str
    column: str
    column_type: str
    primary_key: bool = False
    nullable: bool = True
    unique: bool = False
    references: ForeignKeyRef | None = None

    def __post_init__(self) -> None:
        if self.primary_key and self.references is not None:
            raise ConfigurationError(
                f"field '{self.name}' cannot be both primary key and foreign key"
            )

    @property
    def is_foreign_key(self) -> bool:
        return self.references is not None

    def references_key(self, table: str, column: str) -> bool:
        """Return whether this field points at ``table.column``."""

        return (
            self.references is not None
            and self.references.table == table
            and self.references.column == column
        )

    @classmethod
    def pk(cls, name: str, column: str, column_type: str) -> FieldDescriptor:
        return cls(
            name=name,
            column=column,
            column_type=column_type,
            primary_key=True,
            nullable=False,
            unique=True,
        )

    @classmethod
    def fk(
        cls,
        name: str,
        column: str,
        column_type: str,
        ref_table: str,
        ref_column: str,
        *,
        nullable: bool = False,
    ) -> FieldDescriptor:
        return cls(
            name=name,
            column=column,
            column_type=column_type,
            nullable=nullable,
            references=ForeignKeyRef(ref_table, ref_column),
        )

    @classmethod
    def regular(
        cls,
        name: str,
        column: str,
        column_type: str,
        *,
        nullable: bool = True,
        unique: bool = False,
    ) -> FieldDescriptor:
        return cls(
            name=name,
            column=column,
            column_type=column_type,
            nullable=nullable,
            unique=unique,
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class EntityDescriptor:
    """Mapping of one logical record type onto a table.

    ``children`` enumerates the nested relations a record of this entity may carry. Leaving
    it as ``None`` keeps implicit discovery: any nested value whose key names a catalog entity
    is treated as a child.
    """

    name: str
    table: str
    primary_key_column: str | None
    fields: tuple[FieldDescriptor, ...]
    children: tuple[str, ...] | None = None
    _by_name: dict[str, FieldDescriptor] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        if self.children is not None:
            object.__setattr__(self, "children", tuple(self.children))

        keys = [item for item in self.fields if item.primary_key]
        if len(keys) > 1:
            names = ", ".join(item.name for item in keys)
            raise ConfigurationError(f"entity '{self.name}' declares several primary keys: {names}")
        if keys and keys[0].column != self.primary_key_column:
            raise ConfigurationError(
                f"entity '{self.name}' primary key column '{self.primary_key_column}' "
                f"does not match field '{keys[0].name}' column '{keys[0].column}'"
            )

        by_name: dict[str, FieldDescriptor] = {}
        for item in self.fields:
            if item.name in by_name:
                raise ConfigurationError(f"entity '{self.name}' declares field '{item.name}' twice")
            by_name[item.name] = item
        object.__setattr__(self, "_by_name", by_name)

    @property
    def primary_key(self) -> FieldDescriptor | None:
        return next((item for item in self.fields if item.primary_key), None)

    def require_primary_key(self) -> FieldDescriptor:
        key = self.primary_key
        if key is None:
            raise ConfigurationError(f"No primary key defined for entity '{self.name}'")
        return key

    def get_field(self, name: str) -> FieldDescriptor | None:
        return self._by_name.get(name)

    def declares(self, name: str) -> bool:
        return name in self._by_name

    def foreign_key_to(self, parent: EntityDescriptor) -> FieldDescriptor | None:
        """Return the first field referencing ``parent``'s primary key, if any."""

        parent_key = parent.primary_key
        if parent_key is None:
            return None
        return next(
            (
                item
                for item in self.fields
                if item.references_key(parent.table, parent_key.column)
            ),
            None,
        )
