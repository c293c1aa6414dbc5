"""
Raw DB-API connections for a DataSource.

Uses psycopg (PostgreSQL), pymysql (MySQL) or sqlite3 based on product_type.
Every connection leaves here in auto-commit mode; the helpers below switch it
per driver since PEP 249 has no standard way to do so.
"""

import sqlite3
from typing import Any

import psycopg
import pymysql

from dbutility.core.config import settings
from dbutility.models import DataSource, ProductTypeEnum


def connect(datasource: DataSource) -> Any:
    """
    Open a connection for a validated DataSource.

    sqlite only needs database (a file path or ":memory:"); postgres and mysql
    fall back to their default ports when port is unset.
    """
    pt = datasource.product_type
    timeout = settings.EXTERNAL_DB_CONNECT_TIMEOUT

    if pt == ProductTypeEnum.SQLITE:
        # Pooled connections may be handed to another thread, never shared.
        # Transactions are always explicit (see set_autocommit).
        return sqlite3.connect(
            datasource.database,
            timeout=timeout,
            isolation_level=None,
            check_same_thread=False,
        )
    if pt == ProductTypeEnum.POSTGRES:
        return psycopg.connect(
            host=datasource.host,
            port=datasource.port or 5432,
            dbname=datasource.database,
            user=datasource.username,
            password=datasource.password,
            connect_timeout=timeout,
            autocommit=True,
        )
    if pt == ProductTypeEnum.MYSQL:
        return pymysql.connect(
            host=datasource.host,
            port=datasource.port or 3306,
            database=datasource.database,
            user=datasource.username,
            password=datasource.password,
            connect_timeout=timeout,
            autocommit=True,
        )
    raise ValueError(f"Unsupported product_type: {pt}")


def driver_error(product_type: ProductTypeEnum) -> type[Exception]:
    """Return the PEP 249 ``Error`` base class of the driver for product_type."""
    if product_type == ProductTypeEnum.POSTGRES:
        return psycopg.Error
    if product_type == ProductTypeEnum.MYSQL:
        return pymysql.Error
    if product_type == ProductTypeEnum.SQLITE:
        return sqlite3.Error
    raise ValueError(f"Unsupported product_type: {product_type}")


def set_autocommit(conn: Any, product_type: ProductTypeEnum, flag: bool) -> None:
    """
    Switch auto-commit on a raw connection.

    Turning it on commits an open transaction, as the server drivers do.
    sqlite keeps isolation_level=None and opens an explicit BEGIN instead, so
    DDL and reads are part of the transaction too.
    """
    if product_type == ProductTypeEnum.POSTGRES:
        conn.autocommit = flag
    elif product_type == ProductTypeEnum.MYSQL:
        conn.autocommit(flag)
    elif product_type == ProductTypeEnum.SQLITE:
        if flag:
            if conn.in_transaction:
                conn.commit()
        elif not conn.in_transaction:
            conn.execute("BEGIN")
    else:
        raise ValueError(f"Unsupported product_type: {product_type}")


def get_autocommit(conn: Any, product_type: ProductTypeEnum) -> bool:
    """Read auto-commit from a raw connection."""
    if product_type == ProductTypeEnum.POSTGRES:
        return bool(conn.autocommit)
    if product_type == ProductTypeEnum.MYSQL:
        return bool(conn.get_autocommit())
    if product_type == ProductTypeEnum.SQLITE:
        return not conn.in_transaction
    raise ValueError(f"Unsupported product_type: {product_type}")
