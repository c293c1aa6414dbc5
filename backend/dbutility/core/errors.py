"""
Error types shared by the pool, statement and transaction layers.
"""


class DatabaseError(Exception):
    """Raised when a database access fails (prepare, bind, execute, commit...)."""

    pass


class ConnectivityError(DatabaseError):
    """Raised when a connection cannot be acquired from the pool."""

    pass


class DataSourceInitError(RuntimeError):
    """Raised when the connection pool cannot be constructed."""

    pass
