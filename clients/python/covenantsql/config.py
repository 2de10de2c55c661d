"""Connection settings for the CovenantSQL adapter."""

import os
import ssl
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs, urlparse

from .exceptions import ValidationError

SCHEME = "covenantsql"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 11105
DEFAULT_TIMEOUT = 30.0

_TRUE_VALUES = ("1", "true", "yes", "on")


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUE_VALUES


def _as_port(value: Any) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid port: {value!r}")
    if not 0 < port < 65536:
        raise ValidationError(f"Invalid port: {port}")
    return port


@dataclass
class ConnectionConfig:
    """Where and how to reach a CovenantSQL adapter.

    Args:
        database: Database ID the statements run against.
        host: Adapter host.
        port: Adapter port.
        ssl: Use https instead of http.
        cert_path: Client certificate (PEM) for mutual TLS.
        key_path: Private key matching ``cert_path``.
        verify: Verify the adapter's server certificate.
        timeout: Transport timeout in seconds.
    """

    database: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    ssl: bool = False
    cert_path: str | None = None
    key_path: str | None = None
    verify: bool = True
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.database:
            raise ValidationError("A database is required")
        if not self.host:
            raise ValidationError("A host is required")
        self.port = _as_port(self.port)
        self.ssl = _as_bool(self.ssl)
        self.verify = _as_bool(self.verify)
        try:
            self.timeout = float(self.timeout)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid timeout: {self.timeout!r}")
        if self.timeout <= 0:
            raise ValidationError(f"Invalid timeout: {self.timeout}")
        if self.key_path and not self.cert_path:
            raise ValidationError("key_path given without cert_path")

    @property
    def scheme(self) -> str:
        return "https" if self.ssl else "http"

    @property
    def base_url(self) -> str:
        """Base URL of the adapter, e.g. ``https://127.0.0.1:11105``."""
        return f"{self.scheme}://{self.host}:{self.port}"

    def ssl_verify(self) -> "ssl.SSLContext | bool":
        """Return the ``verify`` argument for ``httpx.Client``.

        A plain bool unless a client certificate is configured, in which case
        an SSL context carrying the certificate chain is built.
        """
        if not self.cert_path:
            return self.verify

        context = ssl.create_default_context()
        if not self.verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        try:
            context.load_cert_chain(self.cert_path, self.key_path)
        except (OSError, ssl.SSLError) as e:
            raise ValidationError(f"Cannot load client certificate: {e}") from e
        return context

    @classmethod
    def from_url(cls, url: str, **overrides: Any) -> "ConnectionConfig":
        """Create a ConnectionConfig from a connection URL.

        The URL has the form
        ``covenantsql://host:port/database?ssl=true&cert_path=..&key_path=..``.
        A leading ``jdbc:`` is accepted. ``sslmode=none`` disables server
        certificate verification. Keyword arguments override URL values.

        Example:
            >>> config = ConnectionConfig.from_url("covenantsql://127.0.0.1:11105/0a25")
            >>> config.base_url
            'http://127.0.0.1:11105'
        """
        if url.startswith("jdbc:"):
            url = url[len("jdbc:"):]

        parsed = urlparse(url)
        if parsed.scheme != SCHEME:
            raise ValidationError(f"Unsupported URL scheme: {parsed.scheme!r}")

        try:
            port = parsed.port
        except ValueError:
            raise ValidationError(f"Invalid port in URL: {url}")

        kwargs: dict[str, Any] = {
            "database": parsed.path.lstrip("/"),
            "host": parsed.hostname or DEFAULT_HOST,
            "port": port or DEFAULT_PORT,
        }

        query = {k: v[-1] for k, v in parse_qs(parsed.query).items()}
        for key in ("ssl", "cert_path", "key_path", "verify", "timeout"):
            if key in query:
                kwargs[key] = query[key]
        if query.get("sslmode", "").lower() == "none":
            kwargs["verify"] = False

        kwargs.update(overrides)
        return cls(**kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> "ConnectionConfig":
        """Create a ConnectionConfig from ``COVENANTSQL_*`` environment variables."""
        kwargs: dict[str, Any] = {
            "database": os.environ.get("COVENANTSQL_DATABASE", ""),
            "host": os.environ.get("COVENANTSQL_HOST", DEFAULT_HOST),
            "port": os.environ.get("COVENANTSQL_PORT", DEFAULT_PORT),
            "ssl": os.environ.get("COVENANTSQL_SSL", "false"),
            "cert_path": os.environ.get("COVENANTSQL_CERT_PATH"),
            "key_path": os.environ.get("COVENANTSQL_KEY_PATH"),
        }
        kwargs.update(overrides)
        return cls(**kwargs)
