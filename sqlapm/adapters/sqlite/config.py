"""SQLite configuration producing instrumented connections."""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TypedDict

from typing_extensions import NotRequired

from sqlapm.adapters.sqlite.driver import SqliteConnection
from sqlapm.config import InstrumentationConfig
from sqlapm.connection import InstrumentedConnection
from sqlapm.typing import ErrorMode
from sqlapm.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Generator

    from sqlapm.subscribers import Subscriber

__all__ = ("SqliteConfig", "SqliteConnectionParams")

logger = get_logger("adapters.sqlite.config")


class SqliteConnectionParams(TypedDict, total=False):
    """SQLite connection parameters passed to :func:`sqlite3.connect`."""

    database: NotRequired[str]
    timeout: NotRequired[float]
    detect_types: NotRequired[int]
    check_same_thread: NotRequired[bool]
    cached_statements: NotRequired[int]
    uri: NotRequired[bool]


class SqliteConfig:
    """Builds instrumented SQLite connections from connection parameters."""

    __slots__ = ("connection_config", "error_mode", "instrumentation")

    def __init__(
        self,
        *,
        connection_config: "SqliteConnectionParams | dict[str, Any] | None" = None,
        error_mode: "ErrorMode | str" = ErrorMode.EXCEPTION,
        instrumentation: "InstrumentationConfig | None" = None,
    ) -> None:
        """Initialize SQLite configuration.

        Args:
            connection_config: Parameters for :func:`sqlite3.connect`. Defaults to an in-memory database.
            error_mode: How the client reports failures (member or name).
            instrumentation: Subscribers and dispatch options applied to every connection.
        """
        connection_config = dict(connection_config or {})
        connection_config.setdefault("database", ":memory:")
        database_path = str(connection_config["database"])
        if database_path.startswith("file:") and not connection_config.get("uri"):
            logger.debug(
                "Database URI detected (%s) but uri=True not set. "
                "Auto-enabling URI mode to prevent physical file creation.",
                database_path,
            )
            connection_config["uri"] = True

        self.connection_config: dict[str, Any] = connection_config
        self.error_mode = ErrorMode.coerce(error_mode)
        self.instrumentation = instrumentation.copy() if instrumentation else InstrumentationConfig()

    def create_driver_connection(self) -> SqliteConnection:
        """Open an uninstrumented client connection."""
        return SqliteConnection(error_mode=self.error_mode, **self.connection_config)

    def create_connection(self, *subscribers: "Subscriber") -> InstrumentedConnection:
        """Open an instrumented connection.

        Args:
            *subscribers: Registered after the configured subscribers.
        """
        config = self.instrumentation.with_subscribers(subscribers) if subscribers else self.instrumentation
        return InstrumentedConnection(self.create_driver_connection(), config)

    @contextmanager
    def provide_connection(self, *subscribers: "Subscriber") -> "Generator[InstrumentedConnection, None, None]":
        """Provide an instrumented connection that is closed on exit."""
        connection = self.create_connection(*subscribers)
        try:
            yield connection
        finally:
            connection.close()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(connection_config={self.connection_config!r}, "
            f"error_mode={self.error_mode}, instrumentation={self.instrumentation!r})"
        )
