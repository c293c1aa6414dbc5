"""
PreparedStatement: SQL text, a DB-API cursor and 1-based bound parameters.

PEP 249 binds by passing a sequence to cursor.execute(), so the set_* methods
record (kind, value) per position and the positional tuple is built at
execution time. Placeholders are whatever the driver's paramstyle expects
(``?`` for sqlite3, ``%s`` for psycopg and pymysql).
"""

import ctypes
import datetime
import logging
from collections.abc import Sequence
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple

from dbutility.core.errors import DatabaseError

from .snapshot import Column, ResultSnapshot

if TYPE_CHECKING:
    from dbutility.core.pool import Connection

_log = logging.getLogger(__name__)

GENERATED_KEY_COLUMN = "generated_key"


class ParamKind(str, Enum):
    """How a parameter was bound."""

    DOUBLE = "double"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    DATE = "date"
    BOOLEAN = "boolean"
    BYTES = "bytes"
    TIMESTAMP = "timestamp"
    ARRAY = "array"
    DECIMAL = "decimal"
    LONG = "long"
    TIME = "time"
    CLOB = "clob"
    BLOB = "blob"
    NULL = "null"
    OBJECT = "object"


class BoundParameter(NamedTuple):
    kind: ParamKind
    value: Any
    sql_type: int | None = None


class PreparedStatement:
    """
    A statement bound to one Connection. Use as a context manager.

    The cursor is opened on construction and closed exactly once by close().
    """

    def __init__(
        self,
        connection: "Connection",
        sql: str,
        *,
        return_generated_keys: bool = False,
    ) -> None:
        self._connection = connection
        self._sql = sql
        self._return_generated_keys = return_generated_keys
        self._error_cls = connection.driver_error
        self._cursor = connection.cursor()
        self._params: dict[int, BoundParameter] = {}
        self._batch: list[tuple[Any, ...]] = []
        self._closed = False

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def bound_parameters(self) -> dict[int, BoundParameter]:
        """Current bindings keyed by 1-based position."""
        return dict(self._params)

    @property
    def batch_size(self) -> int:
        return len(self._batch)

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def _bind(
        self, index: int, kind: ParamKind, value: Any, sql_type: int | None = None
    ) -> None:
        if self._closed:
            raise DatabaseError("Statement is closed")
        if index < 1:
            raise DatabaseError(f"Parameter index out of range: {index}")
        self._params[index] = BoundParameter(kind, value, sql_type)

    def set_double(self, index: int, value: float) -> None:
        self._bind(index, ParamKind.DOUBLE, float(value))

    def set_int(self, index: int, value: int) -> None:
        self._bind(index, ParamKind.INT, int(value))

    def set_float(self, index: int, value: ctypes.c_float | float) -> None:
        if isinstance(value, ctypes.c_float):
            value = value.value
        self._bind(index, ParamKind.FLOAT, float(value))

    def set_string(self, index: int, value: str) -> None:
        self._bind(index, ParamKind.STRING, value)

    def set_date(self, index: int, value: datetime.date) -> None:
        self._bind(index, ParamKind.DATE, value)

    def set_boolean(self, index: int, value: bool) -> None:
        self._bind(index, ParamKind.BOOLEAN, bool(value))

    def set_bytes(self, index: int, value: bytes | bytearray | memoryview) -> None:
        self._bind(index, ParamKind.BYTES, bytes(value))

    def set_timestamp(self, index: int, value: datetime.datetime) -> None:
        self._bind(index, ParamKind.TIMESTAMP, value)

    def set_array(self, index: int, value: Sequence[Any]) -> None:
        self._bind(index, ParamKind.ARRAY, list(value))

    def set_decimal(self, index: int, value: Decimal) -> None:
        self._bind(index, ParamKind.DECIMAL, value)

    def set_long(self, index: int, value: int) -> None:
        self._bind(index, ParamKind.LONG, int(value))

    def set_time(self, index: int, value: datetime.time) -> None:
        self._bind(index, ParamKind.TIME, value)

    def set_clob(self, index: int, stream: Any) -> None:
        """Bind the full text of a readable text stream."""
        self._bind(index, ParamKind.CLOB, _read_stream(stream, str))

    def set_blob(self, index: int, stream: Any) -> None:
        """Bind the full content of a readable binary stream."""
        self._bind(index, ParamKind.BLOB, _read_stream(stream, bytes))

    def set_null(self, index: int, sql_type: int) -> None:
        self._bind(index, ParamKind.NULL, None, int(sql_type))

    def set_object(self, index: int, value: Any) -> None:
        """Bind value as is; the driver decides how to adapt it."""
        self._bind(index, ParamKind.OBJECT, value)

    def clear_parameters(self) -> None:
        self._params.clear()

    def _parameter_values(self) -> tuple[Any, ...]:
        if not self._params:
            return ()
        values = []
        for i in range(1, max(self._params) + 1):
            p = self._params.get(i)
            if p is None:
                raise DatabaseError(f"No value specified for parameter {i}")
            values.append(p.value)
        return tuple(values)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def _check_open(self) -> None:
        if self._closed:
            raise DatabaseError("Statement is closed")

    def _run(self, values: tuple[Any, ...]) -> None:
        _log.debug("execute %r with %d parameter(s)", self._sql, len(values))
        try:
            if values:
                self._cursor.execute(self._sql, values)
            else:
                self._cursor.execute(self._sql)
        except self._error_cls as e:
            raise DatabaseError(str(e)) from e

    def execute_query(self) -> ResultSnapshot:
        """Execute and copy the result set into a ResultSnapshot."""
        self._check_open()
        self._run(self._parameter_values())
        return self._snapshot()

    def execute_update(self) -> int:
        """Execute and return the driver-reported affected row count."""
        self._check_open()
        self._run(self._parameter_values())
        rc = self._cursor.rowcount
        return rc if rc is not None and rc >= 0 else 0

    def add_batch(self) -> None:
        """Queue the current bindings as one batch entry and clear them."""
        self._check_open()
        self._batch.append(self._parameter_values())
        self._params.clear()

    def execute_batch(self) -> int:
        """Run every queued entry in one executemany() call, in queue order."""
        self._check_open()
        batch, self._batch = self._batch, []
        if not batch:
            return 0
        try:
            self._cursor.executemany(self._sql, batch)
        except self._error_cls as e:
            raise DatabaseError(str(e)) from e
        rc = self._cursor.rowcount
        return rc if rc is not None and rc >= 0 else 0

    def get_generated_keys(self) -> ResultSnapshot:
        """
        Keys generated by the last execution.

        Rows returned by the statement itself (``RETURNING``) win; otherwise
        the cursor's lastrowid becomes a single ``generated_key`` row.
        """
        self._check_open()
        if not self._return_generated_keys:
            raise DatabaseError(
                "Generated keys not requested; prepare the statement with return_generated_keys=True"
            )
        if self._cursor.description:
            return self._snapshot()
        last_id = getattr(self._cursor, "lastrowid", None)
        if last_id is None:
            return ResultSnapshot.empty()
        return ResultSnapshot([Column(GENERATED_KEY_COLUMN)], [(last_id,)])

    def _snapshot(self) -> ResultSnapshot:
        try:
            return ResultSnapshot.from_cursor(self._cursor)
        except self._error_cls as e:
            raise DatabaseError(str(e)) from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._batch.clear()
        try:
            self._cursor.close()
        except self._error_cls as e:
            raise DatabaseError(str(e)) from e

    def __enter__(self) -> "PreparedStatement":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if exc is None:
            self.close()
            return
        # Keep the exception already in flight as the one the caller sees.
        try:
            self.close()
        except DatabaseError as close_error:
            _log.warning("failed to close %r: %s", self, close_error)

    def __repr__(self) -> str:
        return f"<PreparedStatement {self._sql!r} params={len(self._params)}>"


def _read_stream(stream: Any, expected: type) -> Any:
    try:
        data = stream.read()
    except (OSError, ValueError) as e:
        raise DatabaseError(f"Cannot read stream parameter: {e}") from e
    if not isinstance(data, expected):
        raise DatabaseError(
            f"Expected {expected.__name__} from stream, got {type(data).__name__}"
        )
    return data
