"""SQLAlchemy dialect for CovenantSQL."""

from typing import Any

from sqlalchemy.engine import default
from sqlalchemy.engine.url import URL

from ..config import DEFAULT_HOST, DEFAULT_PORT


class CovenantDialect(default.DefaultDialect):
    """SQLAlchemy dialect for CovenantSQL.

    Usage:
        from sqlalchemy import create_engine, text

        engine = create_engine("covenantsql://127.0.0.1:11105/<database id>")

        with engine.connect() as conn:
            result = conn.execute(text("SELECT * FROM users"))

    Query-string options: ``ssl``, ``cert_path``, ``key_path``,
    ``sslmode=none`` and ``timeout``.
    """

    name = "covenantsql"
    driver = "covenantsql"

    supports_statement_cache = True

    # Feature flags
    supports_native_boolean = False
    supports_unicode_statements = True
    supports_unicode_binds = True
    supports_alter = False
    supports_native_enum = False
    supports_sequences = False
    supports_sane_rowcount = True
    supports_sane_multi_rowcount = False
    preexecute_autoincrement_sequences = False
    postfetch_lastrowid = True

    # Default parameter style
    default_paramstyle = "qmark"

    @classmethod
    def import_dbapi(cls) -> Any:
        """Import and return the DBAPI module."""
        from .. import dbapi

        return dbapi

    def create_connect_args(self, url: URL) -> tuple[list[Any], dict[str, Any]]:
        """Create connection arguments from URL.

        Args:
            url: SQLAlchemy URL object.

        Returns:
            Tuple of (args, kwargs) for dbapi.connect().
        """
        kwargs: dict[str, Any] = {
            "host": url.host or DEFAULT_HOST,
            "port": url.port or DEFAULT_PORT,
            "database": url.database,
        }

        query = dict(url.query)
        for key in ("ssl", "cert_path", "key_path", "timeout"):
            if key in query:
                kwargs[key] = query[key]
        if str(query.get("sslmode", "")).lower() == "none":
            kwargs["verify"] = False

        return [], kwargs

    def do_ping(self, dbapi_connection: Any) -> bool:
        """Check if the connection is still alive."""
        dbapi = self.import_dbapi()
        try:
            cursor = dbapi_connection.cursor()
            cursor.execute("SELECT 1")
            cursor.close()
            return True
        except dbapi.Error:
            return False

    def is_disconnect(self, e: Exception, connection: Any, cursor: Any) -> bool:
        from ..exceptions import ConnectionError

        return isinstance(e, ConnectionError)

    def do_commit(self, dbapi_connection: Any) -> None:
        """Statements are committed as they run."""
        pass

    def do_rollback(self, dbapi_connection: Any) -> None:
        """Nothing to roll back; statements are committed as they run."""
        pass

    def _get_server_version_info(self, connection: Any) -> None:
        return None

    def _get_default_schema_name(self, connection: Any) -> str:
        """Return the default schema name."""
        return "main"

    def get_isolation_level_values(self, dbapi_connection: Any) -> list[str]:
        return ["AUTOCOMMIT"]

    def get_isolation_level(self, dbapi_connection: Any) -> str:
        """Return the isolation level."""
        return "AUTOCOMMIT"

    def set_isolation_level(self, dbapi_connection: Any, level: str) -> None:
        """Only AUTOCOMMIT is available."""
        if level != "AUTOCOMMIT":
            from ..exceptions import NotSupportedError

            raise NotSupportedError(f"Isolation level {level} is not supported")


# Register dialect
def register() -> None:
    """Register the CovenantSQL dialect with SQLAlchemy."""
    from sqlalchemy.dialects import registry

    registry.register("covenantsql", "covenantsql.sqlalchemy.dialect", "CovenantDialect")
