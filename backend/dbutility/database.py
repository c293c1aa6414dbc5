"""
DatabaseUtility: statement execution, batch updates and transactions over a
ConnectionPool.

Build one with DatabaseUtility.from_datasource() and pass it around, or use
get_database_utility() for the process-wide instance.

Every execute_* method takes an optional ``connection=``. Without it the call
acquires its own connection and releases it afterwards; with it the call joins
whatever the caller is doing on that connection (e.g. a transaction).
"""

import logging
import threading
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from dbutility.core.config import settings
from dbutility.core.pool import Connection, ConnectionPool, create_data_source
from dbutility.engines.sql import executor, transaction
from dbutility.engines.sql.snapshot import ResultSnapshot
from dbutility.models import DataSource

_log = logging.getLogger(__name__)

T = TypeVar("T")


class DatabaseUtility:
    """Facade over a ConnectionPool."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    @classmethod
    def from_datasource(
        cls, datasource: DataSource, *, pool_size: int | None = None
    ) -> "DatabaseUtility":
        """Create the pool for datasource (ValueError / DataSourceInitError on failure)."""
        return cls(create_data_source(datasource, pool_size=pool_size))

    @property
    def pool(self) -> ConnectionPool:
        return self._pool

    def get_connection(self) -> Connection:
        """Check a connection out of the pool; close() it to give it back."""
        return self._pool.get_connection()

    def execute_query(
        self,
        sql: str,
        result_processor: Callable[[ResultSnapshot], T],
        *params: Any,
        connection: Connection | None = None,
    ) -> T:
        if connection is not None:
            return executor.execute_query(connection, sql, result_processor, *params)
        with self.get_connection() as conn:
            return executor.execute_query(conn, sql, result_processor, *params)

    def execute_update(
        self, sql: str, *params: Any, connection: Connection | None = None
    ) -> int:
        if connection is not None:
            return executor.execute_update(connection, sql, *params)
        with self.get_connection() as conn:
            return executor.execute_update(conn, sql, *params)

    def execute_update_return_keys(
        self,
        sql: str,
        result_processor: Callable[[ResultSnapshot], T],
        *params: Any,
        connection: Connection | None = None,
    ) -> T:
        if connection is not None:
            return executor.execute_update_return_keys(
                connection, sql, result_processor, *params
            )
        with self.get_connection() as conn:
            return executor.execute_update_return_keys(
                conn, sql, result_processor, *params
            )

    def db_execute_batch_update(
        self,
        connection: Connection,
        sql: str,
        batch_parameters: Sequence[Sequence[Any]],
    ) -> None:
        executor.db_execute_batch_update(connection, sql, batch_parameters)

    def execute_void_transaction(self, unit_of_work: Callable[[Connection], Any]) -> None:
        transaction.execute_void_transaction(self, unit_of_work)

    def execute_return_transaction(self, unit_of_work: Callable[[Connection], T]) -> T:
        return transaction.execute_return_transaction(self, unit_of_work)

    def close(self) -> None:
        """Close idle pooled connections."""
        self._pool.dispose()


_database_utility: DatabaseUtility | None = None
_database_utility_lock = threading.Lock()


def get_database_utility(datasource: DataSource | None = None) -> DatabaseUtility:
    """
    Return the process-wide DatabaseUtility (thread-safe double-checked locking).

    The first call builds it from datasource (default: settings.datasource);
    later calls return the same instance and ignore the argument.
    """
    global _database_utility
    if _database_utility is None:
        with _database_utility_lock:
            if _database_utility is None:
                ds = datasource if datasource is not None else settings.datasource
                _log.info("creating DatabaseUtility for %s (%s)", ds.name, ds.product_type.value)
                _database_utility = DatabaseUtility.from_datasource(ds)
    return _database_utility


def reset_database_utility() -> None:
    """Dispose the process-wide instance; the next get_database_utility() rebuilds it."""
    global _database_utility
    with _database_utility_lock:
        instance, _database_utility = _database_utility, None
    if instance is not None:
        instance.close()
