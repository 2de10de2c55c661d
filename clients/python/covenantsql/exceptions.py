"""CovenantSQL driver exceptions.

All errors raised by the driver share one family rooted at :class:`Error`.
The hierarchy follows PEP 249 so the same classes serve the DB-API adapter.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class Error(Exception):
    """Base exception for CovenantSQL errors.

    Every error carries the gateway host and port it relates to, so failures
    can be reported the same way whatever their origin.
    """

    def __init__(
        self,
        message: str,
        host: str | None = None,
        port: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.host = host
        self.port = port

    def __str__(self) -> str:
        if self.host is None:
            return self.message
        return f"{self.message} (host: {self.host}, port: {self.port})"


class Warning(Exception):  # noqa: A001
    """Exception for important warnings."""

    pass


class InterfaceError(Error):
    """Error related to the driver interface rather than the database."""

    pass


class DatabaseError(Error):
    """Error related to the database."""

    pass


class DataError(DatabaseError):
    """Problem with the processed data."""

    pass


class OperationalError(DatabaseError):
    """Error related to the database's operation."""

    pass


class IntegrityError(DatabaseError):
    """Relational integrity of the database is affected."""

    pass


class InternalError(DatabaseError):
    """The database encountered an internal error."""

    pass


class ProgrammingError(DatabaseError):
    """Programming error."""

    pass


class NotSupportedError(DatabaseError):
    """Operation is not supported by the driver."""

    pass


class ValidationError(ProgrammingError):
    """Caller supplied an invalid argument."""

    pass


class InvalidColumnError(ProgrammingError):
    """Unknown column name or index."""

    pass


class RemoteError(DatabaseError):
    """The server answered with ``success: false``."""

    pass


class ConnectionError(OperationalError):  # noqa: A001
    """Transport failure: I/O fault, unreachable host or malformed body."""

    pass


class ClosedResourceError(InterfaceError):
    """Operation attempted on a closed result set, statement or connection."""

    pass


class ProtocolError(InterfaceError):
    """The driver API was used out of order."""

    pass


def translate_errors(func: F) -> F:
    """Map every failure raised by ``func`` into the driver error family.

    The wrapped function must be a method of an object exposing ``host`` and
    ``port``. Driver errors pass through, with host and port filled in when
    missing; anything else is wrapped in :class:`ConnectionError` and chained.
    """

    @functools.wraps(func)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            return func(self, *args, **kwargs)
        except Error as e:
            if e.host is None:
                e.host = self.host
                e.port = self.port
            raise
        except Exception as e:
            logger.debug("Wrapping %s raised by %s", type(e).__name__, func.__name__)
            raise ConnectionError(
                f"{type(e).__name__}: {e}", self.host, self.port
            ) from e

    return wrapper  # type: ignore[return-value]
