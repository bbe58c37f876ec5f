"""Value types produced by the parser and returned by executors."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import overload


@dataclass(frozen=True, slots=True)
class ParsedStatement:
    """SQL text with positional ``?`` placeholders and the values to bind to them."""

    sql: str
    parameters: tuple[object, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))
        placeholders = self.sql.count("?")
        if placeholders != len(self.parameters):
            raise ValueError(
                f"statement has {placeholders} placeholders but {len(self.parameters)} parameters"
            )

    @property
    def verb(self) -> str:
        head = self.sql.lstrip().split(None, 1)
        return head[0].upper() if head else ""

    @property
    def is_insert(self) -> bool:
        return self.verb == "INSERT"


@dataclass(frozen=True, slots=True)
class GeneratedKey:
    """Primary key synthesised for a record of the submitted graph.

    ``path`` locates the record: ``order`` for the root, ``order.lineitem[1]`` for the
    second item of a nested list, ``order.customer`` for a single nested record.
    """

    entity: str
    field: str
    path: str
    value: object


@dataclass(frozen=True, slots=True)
class InsertPlan(Sequence[ParsedStatement]):
    """Ordered insert statements for a record graph, parents before children."""

    statements: tuple[ParsedStatement, ...]
    generated_keys: tuple[GeneratedKey, ...] = ()

    @overload
    def __getitem__(self, index: int) -> ParsedStatement: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[ParsedStatement, ...]: ...

    def __getitem__(self, index: int | slice) -> ParsedStatement | tuple[ParsedStatement, ...]:
        return self.statements[index]

    def __len__(self) -> int:
        return len(self.statements)

    def __iter__(self) -> Iterator[ParsedStatement]:
        return iter(self.statements)

    def key_for(self, path: str) -> object | None:
        return next((key.value for key in self.generated_keys if key.path == path), None)


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of running one statement or a whole plan.

    ``generated_keys`` holds what the driver reports as the last row id of each INSERT,
    in statement order. It is meaningful for auto-increment keys only: SQLite reports a
    rowid even for tables whose text primary key was bound explicitly. Keys the engine
    generated itself are in ``assigned_keys``, located by their path in the record graph.
    """

    affected_rows: int = 0
    generated_keys: tuple[object, ...] = ()
    assigned_keys: tuple[GeneratedKey, ...] = ()
