"""
Bind a sequence of Python values onto a PreparedStatement's positional
placeholders, choosing the setter from each value's runtime type.

The checks run in a fixed order; the first match wins. bool is tested away
from the int rules and datetime away from the date rule because Python makes
them subclasses. NullParam is a tuple, so the array rule skips it.
"""

import ctypes
import datetime
import io
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from dbutility.models import NullParam

from .statement import ParamKind, PreparedStatement

INT32_MIN, INT32_MAX = -(2**31), 2**31 - 1
INT64_MIN, INT64_MAX = -(2**63), 2**63 - 1


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parameter_kind(value: Any) -> ParamKind:
    """Return the ParamKind that value binds as."""
    if isinstance(value, float):
        return ParamKind.DOUBLE
    elif _is_int(value) and INT32_MIN <= value <= INT32_MAX:
        return ParamKind.INT
    elif isinstance(value, ctypes.c_float):
        return ParamKind.FLOAT
    elif isinstance(value, str):
        return ParamKind.STRING
    elif isinstance(value, datetime.date) and not isinstance(value, datetime.datetime):
        return ParamKind.DATE
    elif isinstance(value, bool):
        return ParamKind.BOOLEAN
    elif isinstance(value, (bytes, bytearray, memoryview)):
        return ParamKind.BYTES
    elif isinstance(value, datetime.datetime):
        return ParamKind.TIMESTAMP
    elif isinstance(value, (list, tuple)) and not isinstance(value, NullParam):
        return ParamKind.ARRAY
    elif isinstance(value, Decimal):
        return ParamKind.DECIMAL
    elif _is_int(value) and INT64_MIN <= value <= INT64_MAX:
        return ParamKind.LONG
    elif isinstance(value, datetime.time):
        return ParamKind.TIME
    elif isinstance(value, io.TextIOBase):
        return ParamKind.CLOB
    elif isinstance(value, (io.BufferedIOBase, io.RawIOBase)):
        return ParamKind.BLOB
    elif isinstance(value, NullParam):
        return ParamKind.NULL
    return ParamKind.OBJECT


def set_prepared_statement_parameters(
    stmt: PreparedStatement, params: Sequence[Any]
) -> None:
    """Bind params[i] to placeholder i + 1 for every i."""
    for i, param in enumerate(params):
        index = i + 1
        kind = parameter_kind(param)
        if kind is ParamKind.DOUBLE:
            stmt.set_double(index, param)
        elif kind is ParamKind.INT:
            stmt.set_int(index, param)
        elif kind is ParamKind.FLOAT:
            stmt.set_float(index, param)
        elif kind is ParamKind.STRING:
            stmt.set_string(index, param)
        elif kind is ParamKind.DATE:
            stmt.set_date(index, param)
        elif kind is ParamKind.BOOLEAN:
            stmt.set_boolean(index, param)
        elif kind is ParamKind.BYTES:
            stmt.set_bytes(index, param)
        elif kind is ParamKind.TIMESTAMP:
            stmt.set_timestamp(index, param)
        elif kind is ParamKind.ARRAY:
            stmt.set_array(index, param)
        elif kind is ParamKind.DECIMAL:
            stmt.set_decimal(index, param)
        elif kind is ParamKind.LONG:
            stmt.set_long(index, param)
        elif kind is ParamKind.TIME:
            stmt.set_time(index, param)
        elif kind is ParamKind.CLOB:
            stmt.set_clob(index, param)
        elif kind is ParamKind.BLOB:
            stmt.set_blob(index, param)
        elif kind is ParamKind.NULL:
            stmt.set_null(index, param.sql_type)
        else:
            stmt.set_object(index, param)
