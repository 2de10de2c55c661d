"""Wire envelopes exchanged with the CovenantSQL adapter."""

import datetime
import decimal
from dataclasses import dataclass, field
from typing import Any, Sequence

from .exceptions import ConnectionError


def _convert_value(value: Any) -> Any:
    """Convert a Python value into something the JSON encoder accepts."""
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    elif isinstance(value, decimal.Decimal):
        return str(value)
    return value


@dataclass(frozen=True)
class QueryRequest:
    """Request envelope for one statement execution."""

    database: str
    query: str
    args: tuple[Any, ...] = ()

    @classmethod
    def build(
        cls, database: str, query: str, params: Sequence[Any] | None = None
    ) -> "QueryRequest":
        """Create a QueryRequest, snapshotting the positional parameters."""
        return cls(database=database, query=query, args=tuple(params or ()))

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body posted to the adapter."""
        return {
            "database": self.database,
            "query": self.query,
            "args": [_convert_value(v) for v in self.args],
        }


@dataclass
class ResponseData:
    """Result payload of a successful response."""

    rows: list[tuple[Any, ...]] = field(default_factory=list)
    columns: list[str] = field(default_factory=list)
    affected_rows: int | None = None
    last_insert_id: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResponseData":
        """Create ResponseData from the ``data`` member of a response.

        Rows may be objects keyed by column name, or arrays aligned with an
        explicit ``columns`` list. Both are normalized to tuples in column
        order, so columns sharing a name keep their own values.
        """
        if not isinstance(data, dict):
            raise ConnectionError(f"Malformed response data: {data!r}")

        raw_rows = data.get("rows") or []
        columns = list(data.get("columns") or [])
        # Without explicit columns, the first object row defines the column order
        if not columns and raw_rows and isinstance(raw_rows[0], dict):
            columns = list(raw_rows[0].keys())

        rows = []
        for raw in raw_rows:
            if isinstance(raw, dict):
                rows.append(tuple(raw.get(name) for name in columns))
            elif isinstance(raw, list) and len(raw) == len(columns):
                rows.append(tuple(raw))
            else:
                raise ConnectionError(f"Malformed row in response: {raw!r}")

        return cls(
            rows=rows,
            columns=columns,
            affected_rows=data.get("affected_rows"),
            last_insert_id=data.get("last_insert_id"),
        )


@dataclass
class QueryResponse:
    """Response envelope returned by the adapter."""

    success: bool
    status: str = ""
    data: ResponseData | None = None

    @classmethod
    def from_response(cls, response: Any) -> "QueryResponse":
        """Create QueryResponse from a decoded response body."""
        if not isinstance(response, dict) or not isinstance(
            response.get("success"), bool
        ):
            raise ConnectionError(f"Malformed response envelope: {response!r}")

        data = response.get("data")
        return cls(
            success=response["success"],
            status=response.get("status") or "",
            data=ResponseData.from_dict(data) if data is not None else None,
        )
