from collections.abc import Generator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from dbutility import DatabaseUtility
from dbutility.core.pool import Connection
from dbutility.models import DataSource, ProductTypeEnum
from tests.utils.datasource import make_sqlite_datasource


@pytest.fixture
def sqlite_datasource(tmp_path: Path) -> DataSource:
    return make_sqlite_datasource(tmp_path)


@pytest.fixture
def db(sqlite_datasource: DataSource) -> Generator[DatabaseUtility, None, None]:
    utility = DatabaseUtility.from_datasource(sqlite_datasource, pool_size=2)
    utility.execute_update(
        "CREATE TABLE t (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL)"
    )
    yield utility
    utility.close()


@pytest.fixture
def mock_raw() -> MagicMock:
    """Raw DB-API connection double; cursor() always returns the same cursor."""
    raw = MagicMock()
    cur = MagicMock()
    cur.description = None
    cur.rowcount = 1
    raw.cursor.return_value = cur
    return raw


@pytest.fixture
def mock_connection(mock_raw: MagicMock) -> Connection:
    return Connection(mock_raw, ProductTypeEnum.SQLITE, MagicMock())
