"""Connection to a CovenantSQL adapter."""

import logging
import weakref
from typing import Any

import httpx

from .capabilities import UnsupportedFeaturesMixin, WrapperMixin
from .config import ConnectionConfig
from .exceptions import ClosedResourceError
from .statement import PreparedStatement, Statement

logger = logging.getLogger(__name__)


class Connection(UnsupportedFeaturesMixin, WrapperMixin):
    """Connection to one database served by a CovenantSQL adapter.

    The connection owns the HTTP client shared by all of its statements.
    The adapter commits each statement as it runs; see
    :class:`~covenantsql.capabilities.UnsupportedFeaturesMixin` for the
    transaction-related calls, which raise ``NotSupportedError``.

    Args:
        config: Connection settings.
        transport: Optional ``httpx`` transport, e.g. ``httpx.MockTransport``
            in tests.

    Example:
        >>> config = ConnectionConfig.from_url("covenantsql://127.0.0.1:11105/0a25")
        >>> with Connection(config) as conn:
        ...     rs = conn.create_statement().execute_query("SELECT * FROM users")
    """

    def __init__(
        self,
        config: ConnectionConfig,
        transport: httpx.BaseTransport | None = None,
    ):
        self.config = config
        self.host = config.host
        self.port = config.port
        self.database = config.database
        self.base_url = config.base_url
        self._client = httpx.Client(
            timeout=config.timeout,
            verify=config.ssl_verify(),
            transport=transport,
        )
        self._statements: weakref.WeakSet[Statement] = weakref.WeakSet()
        self._closed = False
        logger.debug("Opened connection to %s database=%s", self.base_url, self.database)

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ClosedResourceError("Connection is closed", self.host, self.port)

    def create_statement(self) -> Statement:
        """Create a new statement."""
        self._check_open()
        statement = Statement(self)
        self._statements.add(statement)
        return statement

    def prepare_statement(self, sql: str) -> PreparedStatement:
        """Create a statement for ``sql`` with ``?`` parameters bound later."""
        self._check_open()
        statement = PreparedStatement(self, sql)
        self._statements.add(statement)
        return statement

    def close(self) -> None:
        """Close every statement and the HTTP client. Idempotent."""
        if self._closed:
            return
        for statement in list(self._statements):
            statement.close()
        self._client.close()
        self._closed = True
        logger.debug("Closed connection to %s", self.base_url)

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def connect(
    url: str | None = None,
    transport: httpx.BaseTransport | None = None,
    **kwargs: Any,
) -> Connection:
    """Open a connection from a URL or keyword settings.

    Args:
        url: ``covenantsql://host:port/database`` URL. Optional when
            ``database`` is passed as a keyword.
        transport: Optional ``httpx`` transport.
        **kwargs: :class:`ConnectionConfig` fields, overriding the URL.

    Returns:
        A new Connection.
    """
    if url is not None:
        config = ConnectionConfig.from_url(url, **kwargs)
    else:
        config = ConnectionConfig(**kwargs)
    return Connection(config, transport=transport)
