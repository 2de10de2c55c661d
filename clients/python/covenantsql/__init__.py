"""CovenantSQL Python Driver.

A Python driver for CovenantSQL databases, talking to the CovenantSQL
adapter over its HTTP/JSON API.

Usage:
    import covenantsql

    conn = covenantsql.connect("covenantsql://127.0.0.1:11105/<database id>")
    stmt = conn.create_statement()

    # Write
    stmt.execute_update("INSERT INTO users (email) VALUES (?)", ["alice@example.com"])
    print(stmt.get_update_count())

    # Read
    rs = stmt.execute_query("SELECT * FROM users")
    while rs.next():
        print(rs.get_int("id"), rs.get_string("email"))

    conn.close()
"""

from .config import ConnectionConfig
from .connection import Connection, connect
from .exceptions import (
    ClosedResourceError,
    ConnectionError,
    DataError,
    Error,
    InvalidColumnError,
    NotSupportedError,
    ProtocolError,
    RemoteError,
    ValidationError,
)
from .result import ResultSet
from .sql import extract_table_name, is_select
from .statement import PreparedStatement, Statement
from .types import QueryRequest, QueryResponse, ResponseData

__version__ = "0.1.0"
__all__ = [
    "connect",
    "Connection",
    "ConnectionConfig",
    "Statement",
    "PreparedStatement",
    "ResultSet",
    "QueryRequest",
    "QueryResponse",
    "ResponseData",
    "is_select",
    "extract_table_name",
    "Error",
    "ValidationError",
    "RemoteError",
    "ConnectionError",
    "DataError",
    "ClosedResourceError",
    "InvalidColumnError",
    "ProtocolError",
    "NotSupportedError",
]
