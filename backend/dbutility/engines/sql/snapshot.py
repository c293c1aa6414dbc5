"""
ResultSnapshot: a disconnected copy of a result set.

Rows and column metadata are fetched in full while the cursor is still open,
so processors can read them after the statement and connection are gone.
"""

from collections.abc import Iterator, Sequence
from typing import Any, NamedTuple


class Column(NamedTuple):
    """One entry of cursor.description (PEP 249)."""

    name: str
    type_code: Any = None
    display_size: int | None = None
    internal_size: int | None = None
    precision: int | None = None
    scale: int | None = None
    null_ok: bool | None = None


class ResultSnapshot:
    """Materialized rows plus column metadata."""

    def __init__(self, columns: Sequence[Column], rows: Sequence[Sequence[Any]]) -> None:
        self._columns = tuple(columns)
        self._rows = [tuple(r) for r in rows]
        self._index = {c.name.lower(): i for i, c in reversed(list(enumerate(self._columns)))}

    @classmethod
    def from_cursor(cls, cursor: Any) -> "ResultSnapshot":
        """Copy everything the cursor holds. No description means no result set."""
        desc = cursor.description
        if not desc:
            return cls((), ())
        columns = [Column(*tuple(d)[:7]) for d in desc]
        return cls(columns, cursor.fetchall())

    @classmethod
    def empty(cls) -> "ResultSnapshot":
        return cls((), ())

    @property
    def columns(self) -> tuple[Column, ...]:
        return self._columns

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self._columns]

    @property
    def rows(self) -> list[tuple[Any, ...]]:
        return list(self._rows)

    def column_index(self, name: str) -> int:
        """0-based index of column name (case-insensitive, first match wins)."""
        try:
            return self._index[name.lower()]
        except KeyError:
            raise KeyError(f"No column named {name!r}") from None

    def get(self, row: int, column: int | str) -> Any:
        """Value at row (0-based) and column (0-based index or name)."""
        if isinstance(column, str):
            column = self.column_index(column)
        return self._rows[row][column]

    def first(self) -> tuple[Any, ...] | None:
        return self._rows[0] if self._rows else None

    def scalar(self, default: Any = None) -> Any:
        """First column of the first row, or default when there are no rows."""
        if not self._rows or not self._rows[0]:
            return default
        return self._rows[0][0]

    def to_dicts(self) -> list[dict[str, Any]]:
        names = self.column_names
        return [dict(zip(names, row, strict=True)) for row in self._rows]

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __bool__(self) -> bool:
        return bool(self._rows)

    def __repr__(self) -> str:
        return f"<ResultSnapshot columns={self.column_names} rows={len(self._rows)}>"
