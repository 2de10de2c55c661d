"""Statement execution against the CovenantSQL adapter."""

import logging
from typing import TYPE_CHECKING, Any, Sequence

from .capabilities import WrapperMixin
from .exceptions import (
    ClosedResourceError,
    RemoteError,
    ValidationError,
    translate_errors,
)
from .result import ResultSet, is_non_negative_int
from .sql import extract_table_name, is_select
from .types import QueryRequest, QueryResponse, ResponseData

if TYPE_CHECKING:
    from .connection import Connection

logger = logging.getLogger(__name__)

API_EXEC = "/v1/exec"
API_QUERY = "/v1/query"

# Update count when no update has run since the last query or reset
NO_UPDATE_COUNT = -1


class Statement(WrapperMixin):
    """Handle for submitting SQL and observing its most recent result.

    A statement holds at most one open result set. A successful execution
    closes the previous result set and replaces it. A failed execution raises
    and leaves the previous result set and update count untouched, so after an
    error callers must not assume that either was reset.

    Statements are not thread-safe; use one statement per thread.

    Example:
        >>> stmt = conn.create_statement()
        >>> stmt.execute_update("INSERT INTO users (email) VALUES (?)", ["a@b.c"])
        1
        >>> stmt.get_update_count()
        1
        >>> rs = stmt.execute_query("SELECT * FROM users")
    """

    def __init__(self, connection: "Connection"):
        self.connection = connection
        self.database = connection.database
        self._result_set: ResultSet | None = None
        self._update_count = NO_UPDATE_COUNT
        self._last_insert_id: int | None = None
        self._max_rows = 0
        self._query_timeout = 0
        self._closed = False

    @property
    def host(self) -> str:
        return self.connection.host

    @property
    def port(self) -> int:
        return self.connection.port

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ClosedResourceError("Statement is closed")

    def _check_statement(self, sql: Any, params: Any) -> None:
        self._check_open()
        if not isinstance(sql, str):
            raise ValidationError(f"SQL must be a string, not {type(sql).__name__}")
        if params is not None and (
            isinstance(params, (str, bytes, dict)) or not isinstance(params, Sequence)
        ):
            raise ValidationError(
                f"Parameters must be a sequence, not {type(params).__name__}"
            )

    def _replace_result_set(self, result_set: ResultSet) -> None:
        if self._result_set is not None and self._result_set is not result_set:
            self._result_set.close()
        self._result_set = result_set

    def _send_request(
        self, path: str, sql: str, params: Sequence[Any] | None
    ) -> QueryResponse:
        """POST one request envelope and decode the response envelope.

        The HTTP status is not checked: the adapter reports failures in the
        body, which is decoded whatever the status.
        """
        request = QueryRequest.build(self.database, sql, params)
        logger.debug(
            "POST %s%s database=%s args=%d",
            self.connection.base_url,
            path,
            self.database,
            len(request.args),
        )

        response = self.connection._client.post(
            f"{self.connection.base_url}{path}",
            json=request.to_payload(),
        )
        result = QueryResponse.from_response(response.json())

        if not result.success:
            logger.warning("Statement rejected by %s: %s", self.host, result.status)
            raise RemoteError(result.status or "Statement failed", self.host, self.port)
        return result

    @translate_errors
    def execute_query(self, sql: str, params: Sequence[Any] | None = None) -> ResultSet:
        """Execute a statement and return its result set.

        Read statements go to the query endpoint. Any other statement is
        executed as an update, and the empty result set installed by the
        update is returned.

        Args:
            sql: Statement text, with ``?`` placeholders for ``params``.
            params: Positional parameter values.

        Returns:
            The new current result set.

        Raises:
            RemoteError: The adapter rejected the statement.
            ConnectionError: The request could not be sent or the response
                could not be decoded.
        """
        return self._execute_query(sql, params)

    def _execute_query(self, sql: str, params: Sequence[Any] | None) -> ResultSet:
        self._check_statement(sql, params)
        if not is_select(sql):
            self._execute_update(sql, params)
            return self._result_set

        response = self._send_request(API_QUERY, sql, params)
        data = response.data or ResponseData()
        result_set = ResultSet(
            rows=data.rows,
            columns=data.columns,
            database=self.database,
            table_name=extract_table_name(sql),
            statement=self,
            max_rows=self._max_rows,
        )
        self._replace_result_set(result_set)
        self._update_count = NO_UPDATE_COUNT
        return result_set

    @translate_errors
    def execute_update(self, sql: str, params: Sequence[Any] | None = None) -> int:
        """Execute a write statement.

        Returns:
            1, the number of statements executed. The number of affected rows
            is available from :meth:`get_update_count`.
        """
        return self._execute_update(sql, params)

    def _execute_update(self, sql: str, params: Sequence[Any] | None) -> int:
        self._check_statement(sql, params)
        response = self._send_request(API_EXEC, sql, params)

        self._replace_result_set(ResultSet.empty(self))
        data = response.data
        if data is not None and data.affected_rows is not None:
            self._update_count = data.affected_rows
        else:
            self._update_count = NO_UPDATE_COUNT
        self._last_insert_id = data.last_insert_id if data is not None else None
        return 1

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> bool:
        """Execute any statement.

        Returns:
            True if the statement was a query and produced a result set.
        """
        self.execute_query(sql, params)
        return is_select(sql)

    def get_result_set(self) -> ResultSet | None:
        return self._result_set

    def get_update_count(self) -> int:
        return self._update_count

    def get_last_insert_id(self) -> int | None:
        """Row ID reported by the last update, if the adapter sent one."""
        return self._last_insert_id

    def advance_to_next_result(self) -> bool:
        """Drop the current result.

        The adapter returns a single result per execution, so there is never
        a further result and this always returns False.
        """
        if self._result_set is not None:
            self._result_set.close()
            self._result_set = None
        self._update_count = NO_UPDATE_COUNT
        return False

    get_more_results = advance_to_next_result

    def get_max_rows(self) -> int:
        return self._max_rows

    @translate_errors
    def set_max_rows(self, max_rows: int) -> None:
        """Cap the rows visible through result sets created from now on.

        0 means unlimited. An already open result set keeps its cap.
        """
        if not is_non_negative_int(max_rows):
            raise ValidationError(f"Illegal maxRows value: {max_rows!r}")
        self._max_rows = max_rows

    def get_query_timeout(self) -> int:
        return self._query_timeout

    @translate_errors
    def set_query_timeout(self, seconds: int) -> None:
        """Record a query timeout.

        The value is advisory: requests are bounded by the connection's
        transport timeout, not by this setting.
        """
        if not is_non_negative_int(seconds):
            raise ValidationError(f"Illegal query timeout: {seconds!r}")
        self._query_timeout = seconds

    def close(self) -> None:
        """Close the statement and its current result set. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._result_set is not None:
            self._result_set.close()
        logger.debug("Closed statement on %s", self.database)

    def __enter__(self) -> "Statement":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


class PreparedStatement(Statement):
    """Statement with fixed SQL and positionally bound parameters.

    Parameters are numbered from 1 and sent in order; no type inference is
    done beyond what the JSON encoding of each value carries.

    Example:
        >>> ps = conn.prepare_statement("SELECT * FROM users WHERE id = ?")
        >>> ps.set_parameter(1, 42)
        >>> rs = ps.execute_query()
    """

    def __init__(self, connection: "Connection", sql: str):
        super().__init__(connection)
        self.sql = sql
        self._parameters: dict[int, Any] = {}

    @translate_errors
    def set_parameter(self, index: int, value: Any) -> None:
        if index < 1:
            raise ValidationError(f"Illegal parameter index: {index}")
        self._parameters[index] = value

    def clear_parameters(self) -> None:
        self._parameters.clear()

    def _bound_parameters(self, params: Sequence[Any] | None) -> Sequence[Any]:
        if params is not None:
            return params
        count = max(self._parameters, default=0)
        missing = [i for i in range(1, count + 1) if i not in self._parameters]
        if missing:
            raise ValidationError(f"Parameters not bound: {missing}")
        return [self._parameters[i] for i in range(1, count + 1)]

    @translate_errors
    def execute_query(self, params: Sequence[Any] | None = None) -> ResultSet:  # type: ignore[override]
        """Execute the prepared SQL, with ``params`` or the bound parameters."""
        return self._execute_query(self.sql, self._bound_parameters(params))

    @translate_errors
    def execute_update(self, params: Sequence[Any] | None = None) -> int:  # type: ignore[override]
        return self._execute_update(self.sql, self._bound_parameters(params))

    def execute(self, params: Sequence[Any] | None = None) -> bool:  # type: ignore[override]
        self.execute_query(params)
        return is_select(self.sql)
