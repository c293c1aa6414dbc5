"""
Engines: SQL statement execution, batch updates and transactions.
"""

from dbutility.engines.sql import (
    ResultSnapshot,
    execute_return_transaction,
    execute_void_transaction,
    set_prepared_statement_parameters,
)

__all__ = [
    "ResultSnapshot",
    "execute_return_transaction",
    "execute_void_transaction",
    "set_prepared_statement_parameters",
]
