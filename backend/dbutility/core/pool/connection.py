"""
Connection: one pooled DB-API connection as handed to callers.

Owns auto-commit switching, commit/rollback with driver errors translated to
DatabaseError, and the single release back to the pool on close().
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from dbutility.core.errors import DatabaseError
from dbutility.models import ProductTypeEnum

from .connect import driver_error, get_autocommit, set_autocommit

if TYPE_CHECKING:
    from dbutility.engines.sql.statement import PreparedStatement

_log = logging.getLogger(__name__)


class Connection:
    """A live connection checked out of a pool. Use as a context manager."""

    def __init__(
        self,
        raw: Any,
        product_type: ProductTypeEnum,
        release: Callable[[Any], None],
    ) -> None:
        self._raw = raw
        self._product_type = product_type
        self._release = release
        self._error_cls = driver_error(product_type)
        self._closed = False
        self._manual = False

    @property
    def raw(self) -> Any:
        """The underlying DB-API connection."""
        self._check_open()
        return self._raw

    @property
    def product_type(self) -> ProductTypeEnum:
        return self._product_type

    @property
    def driver_error(self) -> type[Exception]:
        return self._error_cls

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise DatabaseError("Connection is closed")

    def cursor(self) -> Any:
        self._check_open()
        try:
            return self._raw.cursor()
        except self._error_cls as e:
            raise DatabaseError(str(e)) from e

    def prepare_statement(
        self, sql: str, *, return_generated_keys: bool = False
    ) -> "PreparedStatement":
        """Open a statement for sql; generated keys are readable only when requested here."""
        from dbutility.engines.sql.statement import PreparedStatement

        return PreparedStatement(self, sql, return_generated_keys=return_generated_keys)

    def get_auto_commit(self) -> bool:
        self._check_open()
        try:
            return get_autocommit(self._raw, self._product_type)
        except self._error_cls as e:
            raise DatabaseError(str(e)) from e

    def set_auto_commit(self, flag: bool) -> None:
        self._check_open()
        try:
            set_autocommit(self._raw, self._product_type, flag)
        except self._error_cls as e:
            raise DatabaseError(str(e)) from e
        self._manual = not flag

    def commit(self) -> None:
        self._check_open()
        try:
            self._raw.commit()
            self._resume_manual()
        except self._error_cls as e:
            raise DatabaseError(str(e)) from e

    def rollback(self) -> None:
        self._check_open()
        try:
            self._raw.rollback()
            self._resume_manual()
        except self._error_cls as e:
            raise DatabaseError(str(e)) from e

    def _resume_manual(self) -> None:
        # sqlite ends its explicit BEGIN on commit/rollback; open the next one.
        if self._manual and self._product_type == ProductTypeEnum.SQLITE:
            set_autocommit(self._raw, self._product_type, False)

    def close(self) -> None:
        """Return the connection to its pool. Further calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        _log.debug("releasing %r", self)
        self._release(self._raw)

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Connection {self._product_type.value} {state}>"
