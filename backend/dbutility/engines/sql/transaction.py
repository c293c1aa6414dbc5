"""
Run a unit of work inside one transaction.

Acquire a connection, turn auto-commit off, call the unit of work, commit.
Any exception rolls back and is re-raised as DatabaseError (unchanged when it
already is one). Interrupts such as KeyboardInterrupt roll back and propagate
as they are. Auto-commit is switched back on in every case before the
connection goes back to the pool.
"""

import logging
from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from dbutility.core.errors import DatabaseError
from dbutility.core.pool import Connection

_log = logging.getLogger(__name__)

T = TypeVar("T")


class ConnectionProvider(Protocol):
    def get_connection(self) -> Connection: ...


def execute_return_transaction(
    provider: ConnectionProvider,
    unit_of_work: Callable[[Connection], T],
) -> T:
    """Run unit_of_work(conn) in a transaction and return its result."""
    with provider.get_connection() as conn:
        try:
            conn.set_auto_commit(False)
            _log.debug("transaction started on %r", conn)
            result = unit_of_work(conn)
            conn.commit()
            _log.debug("transaction committed on %r", conn)
            return result
        except Exception as e:
            _log.warning("transaction rolled back: %s", e)
            conn.rollback()
            if isinstance(e, DatabaseError):
                raise
            raise DatabaseError(str(e)) from e
        except BaseException:
            # Interrupts are not wrapped, but the work must not be committed
            # when auto-commit is switched back on below.
            _log.warning("transaction interrupted, rolling back on %r", conn)
            conn.rollback()
            raise
        finally:
            conn.set_auto_commit(True)


def execute_void_transaction(
    provider: ConnectionProvider,
    unit_of_work: Callable[[Connection], Any],
) -> None:
    """Run unit_of_work(conn) in a transaction; its return value is ignored."""
    execute_return_transaction(provider, unit_of_work)
