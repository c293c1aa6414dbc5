"""
DB connections and the connection pool.

No driver layer: psycopg and pymysql are installed via pip; sqlite3 ships with
Python. A DataSource (product_type, host, ...) is enough.
"""

from .connect import connect, driver_error, get_autocommit, set_autocommit
from .connection import Connection
from .manager import ConnectionPool, create_data_source

__all__ = [
    "connect",
    "driver_error",
    "get_autocommit",
    "set_autocommit",
    "Connection",
    "ConnectionPool",
    "create_data_source",
]
