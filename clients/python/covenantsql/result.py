"""Forward-only result set over a materialized query response."""

import datetime
import logging
from typing import TYPE_CHECKING, Any, Sequence

from .capabilities import WrapperMixin
from .exceptions import (
    ClosedResourceError,
    DataError,
    InvalidColumnError,
    ProtocolError,
    ValidationError,
)

if TYPE_CHECKING:
    from .statement import Statement

logger = logging.getLogger(__name__)

Column = str | int


def is_non_negative_int(value: Any) -> bool:
    """Return True if ``value`` is a non-negative int (bools excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class ResultSet(WrapperMixin):
    """Row-at-a-time view over the rows of one query response.

    The adapter returns the whole result in a single response body, so every
    row is held in memory from construction on. The row cap only limits how
    many of those rows are visible; ``fetched_rows`` reports how many were
    actually transferred.

    Columns are addressed by name or by 0-based index.

    Example:
        >>> rs = statement.execute_query("SELECT id, email FROM users")
        >>> while rs.next():
        ...     print(rs.get_int("id"), rs.get_string(1))
        >>> rs.close()
    """

    def __init__(
        self,
        rows: "list[Sequence[Any] | dict[str, Any]] | None" = None,
        columns: list[str] | None = None,
        database: str = "",
        table_name: str = "",
        statement: "Statement | None" = None,
        max_rows: int = 0,
    ):
        rows = list(rows or [])
        if columns is None:
            columns = list(rows[0].keys()) if rows and isinstance(rows[0], dict) else []
        self._columns = list(columns)
        # Rows are kept as tuples in column order; a repeated column name
        # resolves to its first occurrence.
        self._rows: list[tuple[Any, ...]] | None = [
            tuple(row.get(name) for name in self._columns)
            if isinstance(row, dict)
            else tuple(row)
            for row in rows
        ]
        self._index: dict[str, int] = {}
        for i, name in enumerate(self._columns):
            self._index.setdefault(name, i)
        self.database = database
        self.table_name = table_name
        self.statement = statement
        self._position = -1
        self._exhausted = False
        self._closed = False
        self._max_rows = 0
        self.set_max_rows(max_rows)

    @classmethod
    def empty(cls, statement: "Statement | None" = None) -> "ResultSet":
        """Create the empty result set installed after an update."""
        return cls(statement=statement)

    # Host and port are reported through the owning statement, if any

    @property
    def host(self) -> str | None:
        return self.statement.host if self.statement is not None else None

    @property
    def port(self) -> int | None:
        return self.statement.port if self.statement is not None else None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def columns(self) -> list[str]:
        """Column names, in result order."""
        self._check_open()
        return list(self._columns)

    @property
    def fetched_rows(self) -> int:
        """Number of rows transferred by the adapter, ignoring the row cap."""
        self._check_open()
        return len(self._rows)

    @property
    def row_number(self) -> int:
        """1-based number of the current row, 0 when not positioned."""
        self._check_open()
        return self._position + 1 if self._is_positioned() else 0

    def get_max_rows(self) -> int:
        return self._max_rows

    def set_max_rows(self, max_rows: int) -> None:
        """Limit the number of visible rows. 0 means unlimited."""
        if not is_non_negative_int(max_rows):
            raise ValidationError(f"Illegal maxRows value: {max_rows!r}")
        self._max_rows = max_rows

    def _visible_count(self) -> int:
        if self._max_rows > 0:
            return min(self._max_rows, len(self._rows))
        return len(self._rows)

    def _check_open(self) -> None:
        if self._closed:
            raise ClosedResourceError("Result set is closed", self.host, self.port)

    def _is_positioned(self) -> bool:
        return self._position >= 0 and not self._exhausted

    def next(self) -> bool:
        """Move to the next row.

        Returns:
            True if the cursor now sits on a row, False once the rows (or the
            row cap) are exhausted.
        """
        self._check_open()
        if self._exhausted:
            return False
        if self._position + 1 < self._visible_count():
            self._position += 1
            return True
        self._exhausted = True
        return False

    advance = next

    def find_column(self, name: str) -> int:
        """Return the 0-based index of the first column named ``name``."""
        self._check_open()
        try:
            return self._index[name]
        except KeyError:
            raise InvalidColumnError(f"Unknown column: {name!r}", self.host, self.port)

    def _column_index(self, column: Column) -> int:
        if isinstance(column, bool) or not isinstance(column, (str, int)):
            raise InvalidColumnError(f"Invalid column: {column!r}", self.host, self.port)
        if isinstance(column, int):
            if not 0 <= column < len(self._columns):
                raise InvalidColumnError(
                    f"Column index out of range: {column}", self.host, self.port
                )
            return column
        return self.find_column(column)

    def _current_row(self) -> tuple[Any, ...]:
        self._check_open()
        if not self._is_positioned():
            raise ProtocolError("Result set is not positioned on a row", self.host, self.port)
        return self._rows[self._position]

    def get(self, column: Column) -> Any:
        """Return the raw value of ``column`` in the current row."""
        row = self._current_row()
        return row[self._column_index(column)]

    def get_values(self) -> tuple[Any, ...]:
        """Return the current row as a tuple, in column order."""
        return self._current_row()

    def get_row(self) -> dict[str, Any]:
        """Return a copy of the current row, keyed by column name.

        Where several columns share a name, the first one is kept.
        """
        row = self._current_row()
        return {name: row[i] for name, i in self._index.items()}

    def _convert(self, column: Column, converter: Any, type_name: str) -> Any:
        value = self.get(column)
        if value is None:
            return None
        try:
            return converter(value)
        except (TypeError, ValueError):
            raise DataError(
                f"Cannot read column {column!r} as {type_name}: {value!r}",
                self.host,
                self.port,
            )

    def get_string(self, column: Column) -> str | None:
        return self._convert(column, str, "string")

    def get_int(self, column: Column) -> int | None:
        return self._convert(column, int, "int")

    def get_float(self, column: Column) -> float | None:
        return self._convert(column, float, "float")

    def get_bool(self, column: Column) -> bool | None:
        def to_bool(value: Any) -> bool:
            if isinstance(value, str):
                if value.lower() in ("1", "true"):
                    return True
                if value.lower() in ("0", "false"):
                    return False
                raise ValueError(value)
            return bool(value)

        return self._convert(column, to_bool, "bool")

    def get_datetime(self, column: Column) -> datetime.datetime | None:
        """Read a column as a datetime.

        Accepts ISO 8601 strings (the adapter's rendering of temporal columns)
        and Unix timestamps.
        """

        def to_datetime(value: Any) -> datetime.datetime:
            if isinstance(value, datetime.datetime):
                return value
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return datetime.datetime.fromtimestamp(value, tz=datetime.timezone.utc)
            if isinstance(value, str):
                return datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
            raise TypeError(value)

        return self._convert(column, to_datetime, "datetime")

    def close(self) -> None:
        """Close the result set and release its rows. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._rows = None
        logger.debug("Closed result set for table %r", self.table_name)

    def __enter__(self) -> "ResultSet":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
