"""Row of typed values."""

from __future__ import annotations

from typing import Any, Iterable, Iterator

from simple_db.errors import IndexOutOfBoundsError
from simple_db.types import TypeTag, Value, format_value


class Row:
    """Ordered, immutable sequence of values.

    A row's schema is the sequence of its values' tags; a row fits a table
    when that sequence equals the table's schema exactly.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Iterable[Any] = ()) -> None:
        self._values: tuple[Value, ...] = tuple(Value.from_python(v) for v in values)

    @property
    def values(self) -> tuple[Value, ...]:
        return self._values

    def schema(self) -> tuple[TypeTag, ...]:
        """Return the tag of each value, in order."""
        return tuple(v.tag for v in self._values)

    def get(self, index: int) -> Value:
        """Return the value at ``index``."""
        if index < 0 or index >= len(self._values):
            raise IndexOutOfBoundsError(index, len(self._values))
        return self._values[index]

    def fits(self, schema: Iterable[TypeTag]) -> bool:
        """Return whether this row's schema equals ``schema``."""
        return self.schema() == tuple(schema)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._values)

    def __getitem__(self, index: int) -> Value:
        return self._values[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash(self._values)

    def __repr__(self) -> str:
        return f"Row({list(self._values)!r})"

    def __str__(self) -> str:
        return " ".join(format_value(v) for v in self._values)


def schema_of(row: Row) -> tuple[TypeTag, ...]:
    """Return the schema of a row."""
    return row.schema()
