"""
Run parameterized statements on a caller-supplied Connection.

- execute_query: result set copied into a ResultSnapshot, then handed to the processor
- execute_update: affected row count
- execute_update_return_keys: generated keys snapshot handed to the processor
- db_execute_batch_update: one statement, many parameter sets, one executemany()

The statement is always closed before these return or raise. Errors raised
by the processor propagate unchanged.
"""

from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from dbutility.core.pool import Connection

from .binder import set_prepared_statement_parameters
from .snapshot import ResultSnapshot

T = TypeVar("T")

ResultProcessor = Callable[[ResultSnapshot], T]


def execute_query(
    connection: Connection,
    sql: str,
    result_processor: ResultProcessor[T],
    *params: Any,
) -> T:
    with connection.prepare_statement(sql) as stmt:
        set_prepared_statement_parameters(stmt, params)
        snapshot = stmt.execute_query()
        return result_processor(snapshot)


def execute_update(connection: Connection, sql: str, *params: Any) -> int:
    with connection.prepare_statement(sql) as stmt:
        set_prepared_statement_parameters(stmt, params)
        return stmt.execute_update()


def execute_update_return_keys(
    connection: Connection,
    sql: str,
    result_processor: ResultProcessor[T],
    *params: Any,
) -> T:
    with connection.prepare_statement(sql, return_generated_keys=True) as stmt:
        set_prepared_statement_parameters(stmt, params)
        stmt.execute_update()
        keys = stmt.get_generated_keys()
        return result_processor(keys)


def db_execute_batch_update(
    connection: Connection,
    sql: str,
    batch_parameters: Sequence[Sequence[Any]],
) -> None:
    with connection.prepare_statement(sql) as stmt:
        for params in batch_parameters:
            set_prepared_statement_parameters(stmt, params)
            stmt.add_batch()
        stmt.execute_batch()
