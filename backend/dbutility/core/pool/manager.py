"""
Connection pool for the configured DataSource.

Reuses raw connections to avoid open/close on every call. Connections are
handed out wrapped in Connection and come back through Connection.close().
"""

import logging
import threading
from typing import Any

from dbutility.core.config import settings
from dbutility.core.errors import ConnectivityError, DataSourceInitError
from dbutility.models import DataSource

from .connect import connect, set_autocommit
from .connection import Connection

_log = logging.getLogger(__name__)


class ConnectionPool:
    """Bounded idle-connection pool for one DataSource."""

    def __init__(self, datasource: DataSource, *, pool_size: int | None = None) -> None:
        self._datasource = datasource
        self._idle: list[Any] = []
        self._lock = threading.Lock()
        self._pool_size: int = (
            pool_size if pool_size is not None else settings.EXTERNAL_DB_POOL_SIZE
        )
        self._disposed = False

    @property
    def datasource(self) -> DataSource:
        return self._datasource

    def get_connection(self) -> Connection:
        """Get a connection (from the idle list or freshly opened)."""
        raw = self._pop()
        if raw is None:
            try:
                raw = connect(self._datasource)
            except Exception as e:
                raise ConnectivityError(
                    f"Cannot connect to {self._datasource.name}: {e}"
                ) from e
            _log.debug("opened new connection for %s", self._datasource.name)
        return Connection(raw, self._datasource.product_type, self.release)

    def release(self, raw: Any) -> None:
        """Return a raw connection to the pool (or close it if the pool is full)."""
        try:
            raw.rollback()
            set_autocommit(raw, self._datasource.product_type, True)
        except Exception as e:
            _log.warning("discarding connection that failed reset: %s", e)
            self._close_quiet(raw)
            return

        with self._lock:
            if not self._disposed and len(self._idle) < self._pool_size:
                self._idle.append(raw)
                return

        self._close_quiet(raw)

    def warm_up(self) -> None:
        """Open one connection now so bad settings fail at construction."""
        raw = connect(self._datasource)
        with self._lock:
            self._idle.append(raw)

    def dispose(self) -> None:
        """Close every idle connection; later releases close instead of pooling."""
        with self._lock:
            entries = list(self._idle)
            self._idle.clear()
            self._disposed = True
        for raw in entries:
            self._close_quiet(raw)

    def stats(self) -> dict[str, int]:
        """Return pool statistics for monitoring."""
        with self._lock:
            return {
                "pool_size": self._pool_size,
                "idle_connections": len(self._idle),
            }

    def _pop(self) -> Any:
        with self._lock:
            if self._idle:
                return self._idle.pop()
        return None

    @staticmethod
    def _close_quiet(conn: Any) -> None:
        try:
            conn.close()
        except Exception as e:
            _log.debug("close failed: %s", e)


def create_data_source(
    datasource: DataSource | None, *, pool_size: int | None = None
) -> ConnectionPool:
    """
    Create a pool for datasource and open its first connection.

    Raises ValueError when datasource is missing or incomplete, and
    DataSourceInitError when the pool cannot be built.
    """
    if (
        datasource is None
        or datasource.product_type is None
        or not datasource.database
    ):
        raise ValueError("Product type and database must be provided.")

    try:
        pool = ConnectionPool(datasource, pool_size=pool_size)
        pool.warm_up()
    except Exception as e:
        raise DataSourceInitError(f"Error creating DataSource: {e}") from e
    return pool
