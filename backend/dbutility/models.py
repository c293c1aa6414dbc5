"""
Models: ProductTypeEnum, DataSource, SqlType, NullParam.

DataSource is a plain (non-table) SQLModel so it validates like the rest of the
schemas but is never persisted.
"""

from enum import Enum, IntEnum
from typing import NamedTuple

from pydantic import model_validator
from sqlmodel import Field, SQLModel


class ProductTypeEnum(str, Enum):
    """Supported database product types (postgres, mysql, sqlite)."""

    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"


class DataSource(SQLModel):
    """Connection settings for one database."""

    name: str = Field(default="default", min_length=1, max_length=255)
    product_type: ProductTypeEnum
    host: str | None = Field(default=None, max_length=255)
    port: int | None = Field(default=None, ge=1, le=65535)
    database: str = Field(..., min_length=1, max_length=1024)
    username: str | None = Field(default=None, max_length=255)
    password: str = Field(default="", max_length=512)

    @model_validator(mode="after")
    def network_database_requires_host(self) -> "DataSource":
        if self.product_type == ProductTypeEnum.SQLITE:
            return self
        if not (self.host and self.host.strip()):
            raise ValueError(f"host is required for {self.product_type.value}")
        if not (self.username and self.username.strip()):
            raise ValueError(f"username is required for {self.product_type.value}")
        return self


class SqlType(IntEnum):
    """Standard SQL type codes (same numbering as java.sql.Types)."""

    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    BOOLEAN = 16


class NullParam(NamedTuple):
    """
    A SQL NULL with an explicit type.

    Pass it as a statement parameter when the driver needs to know the column
    type of a null value, e.g. ``NullParam(SqlType.VARCHAR)``.
    """

    sql_type: int
