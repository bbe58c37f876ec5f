"""Tagged variants for the values an input record may hold.

Input records arrive as untyped mappings. ``classify`` sorts each value into exactly one of
``Scalar``, ``Record`` or ``RecordList`` so the planner can match on the variant instead of
probing types at every step.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from .errors import ValidationError

InputRecord: TypeAlias = MutableMapping[str, Any]


@dataclass(frozen=True, slots=True)
class Scalar:
    value: object


@dataclass(frozen=True, slots=True)
class Record:
    record: InputRecord


@dataclass(frozen=True, slots=True)
class RecordList:
    records: tuple[InputRecord, ...]


FieldValue: TypeAlias = Scalar | Record | RecordList


def classify(value: object) -> FieldValue:
    """Return the variant for ``value``.

    Lists and tuples are nested records only when every item is a mapping; an empty list is
    an empty ``RecordList``. A list mixing mappings with other values is rejected.
    """

    if isinstance(value, Mapping):
        return Record(_as_record(value))
    if isinstance(value, (list, tuple)):
        items: list[object] = list(value)  # pyright: ignore[reportUnknownArgumentType]
        nested = [item for item in items if isinstance(item, Mapping)]
        if len(nested) == len(items):
            return RecordList(tuple(_as_record(item) for item in nested))
        if nested:
            raise ValidationError("list mixes nested records with scalar values")
    return Scalar(value)


def _as_record(value: object) -> InputRecord:
    if isinstance(value, MutableMapping):
        return value  # pyright: ignore[reportUnknownVariableType]
    # read-only mappings get a private copy so generated keys have somewhere to go
    return dict(value)  # type: ignore[call-overload]
