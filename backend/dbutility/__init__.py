"""
dbutility: parameterized statements, batch updates and transactions over a
pooled DB-API connection.
"""

from dbutility.core.errors import ConnectivityError, DatabaseError, DataSourceInitError
from dbutility.core.pool import Connection, ConnectionPool, create_data_source
from dbutility.database import (
    DatabaseUtility,
    get_database_utility,
    reset_database_utility,
)
from dbutility.engines.sql import ParamKind, PreparedStatement, ResultSnapshot
from dbutility.models import DataSource, NullParam, ProductTypeEnum, SqlType

__all__ = [
    "Connection",
    "ConnectionPool",
    "ConnectivityError",
    "DataSource",
    "DataSourceInitError",
    "DatabaseError",
    "DatabaseUtility",
    "NullParam",
    "ParamKind",
    "PreparedStatement",
    "ProductTypeEnum",
    "ResultSnapshot",
    "SqlType",
    "create_data_source",
    "get_database_utility",
    "reset_database_utility",
]
