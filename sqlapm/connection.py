"""Instrumented connection facade and subscriber dispatch."""

from types import TracebackType
from typing import TYPE_CHECKING, Any

from typing_extensions import Self

from sqlapm.config import InstrumentationConfig
from sqlapm.events import (
    ExecutionFailedEvent,
    ExecutionStartsEvent,
    ExecutionSucceededEvent,
    PrepareEvent,
    TransactionBeginEvent,
    TransactionCommitEvent,
    TransactionRollbackEvent,
)
from sqlapm.statement import InstrumentedStatement
from sqlapm.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlapm.events import Event
    from sqlapm.protocols import DriverConnectionProtocol
    from sqlapm.subscribers import Subscriber
    from sqlapm.typing import FailureSentinel

__all__ = ("InstrumentedConnection",)

logger = get_logger("connection")


class InstrumentedConnection:
    """Drop-in facade over a client connection that publishes lifecycle events.

    ``exec``, ``prepare``, ``query`` and the transaction controls emit events
    around the wrapped call; their return values and exceptions are passed
    through unchanged. Every other attribute is forwarded to the wrapped
    connection.

    Subscribers are notified synchronously, in registration order, before the
    instrumented call returns.
    """

    __slots__ = ("__weakref__", "_config", "_connection", "_subscribers")

    def __init__(self, connection: "DriverConnectionProtocol", config: "InstrumentationConfig | None" = None) -> None:
        self._connection = connection
        self._config = config.copy() if config else InstrumentationConfig()
        self._subscribers: list[Subscriber] = []

        for subscriber in self._config.subscribers or ():
            self.subscribe(subscriber)
        if self._config.log_events:
            from sqlapm.observability import LoggingSubscriber

            self.subscribe(LoggingSubscriber())

    @property
    def connection(self) -> "DriverConnectionProtocol":
        """The wrapped client connection."""
        return self._connection

    @property
    def config(self) -> InstrumentationConfig:
        return self._config

    @property
    def subscribers(self) -> "tuple[Subscriber, ...]":
        """Registered subscribers in notification order."""
        return tuple(self._subscribers)

    def subscribe(self, subscriber: "Subscriber") -> None:
        """Register ``subscriber``. Registering the same object twice notifies it twice."""
        self._subscribers.append(subscriber)
        logger.debug("Registered subscriber %s", type(subscriber).__name__)

    add_subscriber = subscribe

    def notify_subscribers(self, event: "Event") -> None:
        """Offer ``event`` to every subscriber in registration order."""
        if not self._config.isolate_subscriber_errors:
            for subscriber in self._subscribers:
                event.deliver(subscriber)
            return

        for subscriber in self._subscribers:
            try:
                event.deliver(subscriber)
            except Exception:
                logger.exception(
                    "Subscriber %s failed to handle %s event", type(subscriber).__name__, event.kind
                )

    def exec(self, sql: str) -> "int | FailureSentinel":
        """Execute ``sql`` and return the affected row count."""
        self.notify_subscribers(ExecutionStartsEvent(sql))

        try:
            result = self._connection.exec(sql)
        except Exception as exc:
            self.notify_subscribers(ExecutionFailedEvent(exc))
            raise

        if result is False:
            self.notify_subscribers(ExecutionFailedEvent.from_error(self._connection))
        else:
            self.notify_subscribers(ExecutionSucceededEvent(result))

        return result

    def prepare(self, sql: str) -> "InstrumentedStatement | FailureSentinel":
        """Prepare ``sql``.

        Only a successful prepare is reported; execution events are emitted
        later by the returned statement.
        """
        statement = self._connection.prepare(sql)
        if statement is False:
            return statement

        instrumented = InstrumentedStatement(statement, sql)
        instrumented.bind_connection(self)
        self.notify_subscribers(PrepareEvent(sql))
        return instrumented

    def query(self, sql: str) -> "InstrumentedStatement | FailureSentinel":
        """Prepare and execute ``sql`` in one step, returning the executed statement."""
        self.notify_subscribers(ExecutionStartsEvent(sql))

        try:
            statement = self._connection.query(sql)
        except Exception as exc:
            self.notify_subscribers(ExecutionFailedEvent(exc))
            raise

        if statement is False:
            self.notify_subscribers(ExecutionFailedEvent.from_error(self._connection))
            return statement

        instrumented = InstrumentedStatement(statement, sql)
        instrumented.bind_connection(self)
        self.notify_subscribers(ExecutionSucceededEvent(statement.row_count()))
        return instrumented

    # Transaction controls only report success. Failures raised by the client
    # propagate without an event.
    def begin_transaction(self) -> bool:
        result = self._connection.begin_transaction()
        if result:
            self.notify_subscribers(TransactionBeginEvent())
        return result

    def commit(self) -> bool:
        result = self._connection.commit()
        if result:
            self.notify_subscribers(TransactionCommitEvent())
        return result

    def rollback(self) -> bool:
        result = self._connection.rollback()
        if result:
            self.notify_subscribers(TransactionRollbackEvent())
        return result

    def __getattr__(self, name: str) -> Any:
        return getattr(object.__getattribute__(self, "_connection"), name)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: "type[BaseException] | None",
        exc_val: "BaseException | None",
        exc_tb: "TracebackType | None",
    ) -> None:
        close = getattr(self._connection, "close", None)
        if close is not None:
            close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(connection={self._connection!r}, subscribers={len(self._subscribers)})"
