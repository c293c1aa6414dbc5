"""
SQL engine: parameter binding, statements, result snapshots, transactions.
"""

from dbutility.engines.sql.binder import parameter_kind, set_prepared_statement_parameters
from dbutility.engines.sql.executor import (
    db_execute_batch_update,
    execute_query,
    execute_update,
    execute_update_return_keys,
)
from dbutility.engines.sql.snapshot import Column, ResultSnapshot
from dbutility.engines.sql.statement import BoundParameter, ParamKind, PreparedStatement
from dbutility.engines.sql.transaction import execute_return_transaction, execute_void_transaction

__all__ = [
    "BoundParameter",
    "Column",
    "ParamKind",
    "PreparedStatement",
    "ResultSnapshot",
    "db_execute_batch_update",
    "execute_query",
    "execute_return_transaction",
    "execute_update",
    "execute_update_return_keys",
    "execute_void_transaction",
    "parameter_kind",
    "set_prepared_statement_parameters",
]
