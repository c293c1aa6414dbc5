"""Tests for engines.sql.executor, through DatabaseUtility and on sqlite files."""

import sqlite3
from unittest.mock import MagicMock

import pytest

from dbutility import DatabaseError, DatabaseUtility, NullParam, ResultSnapshot, SqlType
from dbutility.core.pool import Connection
from dbutility.engines.sql import executor
from dbutility.models import ProductTypeEnum


def _first_name(snapshot: ResultSnapshot) -> str:
    return snapshot.get(0, "name") if snapshot else "<none>"


def _seed(db: DatabaseUtility, *names: str) -> None:
    for name in names:
        db.execute_update("INSERT INTO t (name) VALUES (?)", name)


class TestExecuteUpdate:
    def test_delete_returns_affected_rows(self, db: DatabaseUtility) -> None:
        _seed(db, "a", "b")
        assert db.execute_update("DELETE FROM t WHERE id = ?", 42) == 0
        assert db.execute_update("DELETE FROM t WHERE id = ?", 1) == 1
        assert db.execute_update("DELETE FROM t") == 1

    def test_typed_null_reaches_database(self, db: DatabaseUtility) -> None:
        db.execute_update("CREATE TABLE n (v TEXT)")
        db.execute_update("INSERT INTO n (v) VALUES (?)", NullParam(SqlType.VARCHAR))
        assert db.execute_query("SELECT v FROM n", lambda s: s.rows) == [(None,)]

    def test_statement_error_is_database_error(self, db: DatabaseUtility) -> None:
        with pytest.raises(DatabaseError) as exc_info:
            db.execute_update("INSERT INTO missing_table VALUES (?)", 1)
        assert isinstance(exc_info.value.__cause__, sqlite3.Error)
        assert db.pool.stats()["idle_connections"] >= 1


class TestExecuteQuery:
    def test_processor_extracts_column(self, db: DatabaseUtility) -> None:
        _seed(db, "alice", "bob")
        sql = "SELECT name FROM t WHERE id = ?"
        assert db.execute_query(sql, _first_name, 2) == "bob"
        assert db.execute_query(sql, _first_name, 7) == "<none>"

    def test_snapshot_readable_after_release(self, db: DatabaseUtility) -> None:
        _seed(db, "a", "b", "c")
        snapshot = db.execute_query("SELECT id, name FROM t ORDER BY id", lambda s: s)
        db.close()
        assert snapshot.to_dicts() == [
            {"id": 1, "name": "a"},
            {"id": 2, "name": "b"},
            {"id": 3, "name": "c"},
        ]

    def test_processor_error_propagates_unwrapped(self, db: DatabaseUtility) -> None:
        def processor(snapshot: ResultSnapshot) -> None:
            raise LookupError("no such thing")

        with pytest.raises(LookupError, match="no such thing"):
            db.execute_query("SELECT * FROM t", processor)

    def test_caller_connection_is_left_open(self, db: DatabaseUtility) -> None:
        _seed(db, "a")
        with db.get_connection() as conn:
            n = db.execute_query("SELECT COUNT(*) FROM t", ResultSnapshot.scalar, connection=conn)
            assert n == 1
            assert not conn.closed
            assert db.execute_update("DELETE FROM t", connection=conn) == 1


class TestExecuteUpdateReturnKeys:
    def test_insert_returns_generated_key(self, db: DatabaseUtility) -> None:
        _seed(db, "first")
        key = db.execute_update_return_keys(
            "INSERT INTO t (name) VALUES (?)", ResultSnapshot.scalar, "second"
        )
        assert key == 2
        assert db.execute_query("SELECT name FROM t WHERE id = ?", _first_name, key) == "second"

    def test_with_caller_connection(self, db: DatabaseUtility) -> None:
        with db.get_connection() as conn:
            key = db.execute_update_return_keys(
                "INSERT INTO t (name) VALUES (?)", ResultSnapshot.scalar, "x", connection=conn
            )
        assert key == 1


class TestBatchUpdate:
    def test_all_sets_applied_in_order(self, db: DatabaseUtility) -> None:
        with db.get_connection() as conn:
            db.db_execute_batch_update(
                conn,
                "INSERT INTO t (name) VALUES (?)",
                [["p1"], ["p2"], ["p3"]],
            )
        rows = db.execute_query("SELECT id, name FROM t ORDER BY id", lambda s: s.rows)
        assert rows == [(1, "p1"), (2, "p2"), (3, "p3")]

    def test_one_executemany_call(
        self, mock_connection: Connection, mock_raw: MagicMock
    ) -> None:
        executor.db_execute_batch_update(
            mock_connection, "UPDATE t SET name = ? WHERE id = ?", [("a", 1), ("b", 2)]
        )
        cur = mock_raw.cursor.return_value
        cur.executemany.assert_called_once_with(
            "UPDATE t SET name = ? WHERE id = ?", [("a", 1), ("b", 2)]
        )
        cur.execute.assert_not_called()
        cur.close.assert_called_once()

    def test_failed_batch_is_database_error(self, db: DatabaseUtility) -> None:
        with db.get_connection() as conn:
            with pytest.raises(DatabaseError):
                db.db_execute_batch_update(
                    conn, "INSERT INTO t (name) VALUES (?)", [["ok"], [None]]
                )


class TestReleaseOrder:
    def _utility(self, mock_raw: MagicMock, calls: list[str]) -> DatabaseUtility:
        cur = mock_raw.cursor.return_value
        cur.description = [("n", None, None, None, None, None, None)]
        cur.fetchall.return_value = [(1,)]
        cur.close.side_effect = lambda: calls.append("statement")
        pool = MagicMock()
        pool.get_connection.side_effect = lambda: Connection(
            mock_raw, ProductTypeEnum.SQLITE, lambda raw: calls.append("connection")
        )
        return DatabaseUtility(pool)

    def test_statement_closes_before_connection(self, mock_raw: MagicMock) -> None:
        calls: list[str] = []
        utility = self._utility(mock_raw, calls)

        def processor(snapshot: ResultSnapshot) -> int:
            calls.append("processor")
            return snapshot.scalar()

        assert utility.execute_query("SELECT 1 AS n", processor) == 1
        assert calls == ["processor", "statement", "connection"]

    def test_released_once_when_execute_fails(self, mock_raw: MagicMock) -> None:
        calls: list[str] = []
        utility = self._utility(mock_raw, calls)
        mock_raw.cursor.return_value.execute.side_effect = sqlite3.DatabaseError("bad")

        with pytest.raises(DatabaseError, match="bad"):
            utility.execute_update("UPDATE t SET a = ?", 1)
        assert calls == ["statement", "connection"]
