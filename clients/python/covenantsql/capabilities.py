"""Capability declarations shared by driver objects.

The adapter has no transactions, savepoints, stored procedures, type maps or
client info. Instead of accepting those calls and silently doing nothing,
connections expose them as explicit stubs that raise
:class:`~covenantsql.exceptions.NotSupportedError`.
"""

from typing import Any, NoReturn, TypeVar

from .exceptions import NotSupportedError, ProtocolError

T = TypeVar("T")

# Features a connection can be asked about through ``supports()``
SUPPORTED_FEATURES = frozenset(
    {
        "autocommit",
        "positional_parameters",
        "update_count",
        "max_rows",
        "ssl",
    }
)


class WrapperMixin:
    """Type-check-and-downcast helper for driver objects.

    ``unwrap(cls)`` returns ``self`` when it is an instance of ``cls`` and
    raises otherwise. Only the driver's own classes are meaningful targets.
    """

    host: Any
    port: Any

    def is_wrapper_for(self, cls: type) -> bool:
        return isinstance(self, cls)

    def unwrap(self, cls: type[T]) -> T:
        if isinstance(self, cls):
            return self
        raise ProtocolError(
            f"Cannot unwrap {type(self).__name__} to {cls.__name__}",
            self.host,
            self.port,
        )


class UnsupportedFeaturesMixin:
    """Connection features the adapter does not provide.

    Every statement is committed by the adapter as soon as it executes, so
    autocommit is always on and cannot be turned off.
    """

    host: Any
    port: Any

    def supports(self, feature: str) -> bool:
        """Return True if the connection provides ``feature``."""
        return feature in SUPPORTED_FEATURES

    def _not_supported(self, feature: str) -> NoReturn:
        raise NotSupportedError(f"{feature} is not supported", self.host, self.port)

    def get_autocommit(self) -> bool:
        return True

    def set_autocommit(self, autocommit: bool) -> None:
        if not autocommit:
            self._not_supported("Disabling autocommit")

    def commit(self) -> None:
        self._not_supported("Transactions")

    def rollback(self) -> None:
        self._not_supported("Transactions")

    def set_transaction_isolation(self, level: Any) -> None:
        self._not_supported("Transaction isolation")

    def set_savepoint(self, name: str | None = None) -> NoReturn:
        self._not_supported("Savepoints")

    def release_savepoint(self, savepoint: Any) -> None:
        self._not_supported("Savepoints")

    def prepare_call(self, sql: str) -> NoReturn:
        self._not_supported("Callable statements")

    def get_type_map(self) -> NoReturn:
        self._not_supported("Type maps")

    def set_type_map(self, type_map: dict[str, type]) -> None:
        self._not_supported("Type maps")

    def get_client_info(self, name: str | None = None) -> NoReturn:
        self._not_supported("Client info")

    def set_client_info(self, name: str, value: str) -> None:
        self._not_supported("Client info")

    def is_read_only(self) -> bool:
        return False

    def set_read_only(self, read_only: bool) -> None:
        if read_only:
            self._not_supported("Read-only connections")
