"""DBAPI 2.0 compatible interface for CovenantSQL.

This module provides a PEP 249 (DBAPI 2.0) compatible interface on top of
:class:`~covenantsql.statement.Statement`. SQLAlchemy uses it through the
``covenantsql`` dialect.
"""

from typing import Any, Iterator, Sequence

import httpx

from .connection import Connection as _Connection
from .connection import connect as _connect
from .exceptions import (  # noqa: F401
    DatabaseError,
    DataError,
    Error,
    IntegrityError,
    InterfaceError,
    InternalError,
    NotSupportedError,
    OperationalError,
    ProgrammingError,
    Warning,
)
from .sql import is_select

# DBAPI 2.0 module-level globals
apilevel = "2.0"
threadsafety = 1  # Threads may share the module, but not connections
paramstyle = "qmark"  # Question mark style, e.g. WHERE name=?


def connect(
    url: str | None = None,
    transport: httpx.BaseTransport | None = None,
    **kwargs: Any,
) -> "Connection":
    """Create a new database connection.

    Args:
        url: ``covenantsql://host:port/database`` URL.
        transport: Optional ``httpx`` transport.
        **kwargs: Connection settings (host, port, database, ssl, ...).

    Returns:
        A new Connection object.
    """
    return Connection(_connect(url, transport=transport, **kwargs))


class Connection:
    """DBAPI 2.0 connection object."""

    def __init__(self, connection: _Connection):
        self._connection = connection

    @property
    def host(self) -> str:
        return self._connection.host

    @property
    def port(self) -> int:
        return self._connection.port

    def close(self) -> None:
        """Close the connection."""
        self._connection.close()

    def commit(self) -> None:
        """Commit any pending transaction.

        CovenantSQL auto-commits each statement, so this is a no-op.
        """
        self._connection._check_open()

    def rollback(self) -> None:
        """Roll back any pending transaction.

        Statements are committed as they run, so there is never anything to
        roll back.
        """
        self._connection.rollback()

    def cursor(self) -> "Cursor":
        """Create a new cursor."""
        if self._connection.closed:
            raise InterfaceError("Connection is closed", self.host, self.port)
        return Cursor(self)

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class Cursor:
    """DBAPI 2.0 cursor object."""

    def __init__(self, connection: Connection):
        self.connection = connection
        self.description: list[tuple[str, Any, None, None, None, None, None]] | None = (
            None
        )
        self.rowcount: int = -1
        self.arraysize: int = 1
        self._statement = connection._connection.create_statement()
        self._rows: list[tuple[Any, ...]] = []
        self._row_index: int = 0

    @property
    def lastrowid(self) -> int | None:
        """Return the ID of the last inserted row."""
        return self._statement.get_last_insert_id()

    def close(self) -> None:
        """Close the cursor."""
        self._statement.close()
        self._rows = []

    def execute(
        self, operation: str, parameters: Sequence[Any] | None = None
    ) -> "Cursor":
        """Execute a database operation (query or mutation).

        Args:
            operation: SQL statement with ``?`` placeholders.
            parameters: Positional parameter values.
        """
        if isinstance(parameters, dict):
            raise NotSupportedError(
                "Named parameters are not supported, use ? placeholders",
                self.connection.host,
                self.connection.port,
            )

        if is_select(operation):
            result_set = self._statement.execute_query(operation, parameters)
            columns = result_set.columns
            rows = []
            while result_set.next():
                rows.append(result_set.get_values())
            result_set.close()

            # A read always has a description, even an empty one, so callers
            # can tell an empty result from a statement returning no rows.
            self.description = [
                (name, None, None, None, None, None, None) for name in columns
            ]
            self._rows = rows
            self.rowcount = len(rows)
        else:
            self._statement.execute_update(operation, parameters)
            self.description = None
            self._rows = []
            self.rowcount = self._statement.get_update_count()

        self._row_index = 0
        return self

    def executemany(
        self, operation: str, seq_of_parameters: Sequence[Sequence[Any]]
    ) -> None:
        """Execute a database operation multiple times."""
        total = 0
        for parameters in seq_of_parameters:
            self.execute(operation, parameters)
            if self.rowcount > 0:
                total += self.rowcount
        self.rowcount = total

    def fetchone(self) -> tuple[Any, ...] | None:
        """Fetch the next row of a query result set."""
        if self._row_index < len(self._rows):
            row = self._rows[self._row_index]
            self._row_index += 1
            return row
        return None

    def fetchmany(self, size: int | None = None) -> list[tuple[Any, ...]]:
        """Fetch the next set of rows of a query result."""
        if size is None:
            size = self.arraysize

        rows = self._rows[self._row_index : self._row_index + size]
        self._row_index += len(rows)
        return rows

    def fetchall(self) -> list[tuple[Any, ...]]:
        """Fetch all remaining rows of a query result."""
        rows = self._rows[self._row_index :]
        self._row_index = len(self._rows)
        return rows

    def setinputsizes(self, sizes: list[Any]) -> None:
        """Set input sizes (no-op for CovenantSQL)."""
        pass

    def setoutputsize(self, size: int, column: int | None = None) -> None:
        """Set output size (no-op for CovenantSQL)."""
        pass

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return self

    def __next__(self) -> tuple[Any, ...]:
        row = self.fetchone()
        if row is None:
            raise StopIteration
        return row

    def __enter__(self) -> "Cursor":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
