"""Instrumented prepared statement."""

import weakref
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from sqlapm.events import ExecutionFailedEvent, ExecutionStartsEvent, ExecutionSucceededEvent, freeze_parameters

if TYPE_CHECKING:
    from sqlapm.connection import InstrumentedConnection
    from sqlapm.protocols import DriverStatementProtocol
    from sqlapm.typing import StatementParameters

__all__ = ("InstrumentedStatement",)


class InstrumentedStatement:
    """Facade over a client statement that reports its executions.

    Instances are created by :class:`~sqlapm.connection.InstrumentedConnection`
    and dispatch through it. The statement keeps only a weak reference to its
    connection, so it must not outlive it.

    The query text reported in :class:`~sqlapm.events.ExecutionStartsEvent` is
    the text this statement was prepared with.
    """

    __slots__ = ("_connection_ref", "_statement", "query_string")

    def __init__(self, statement: "DriverStatementProtocol", query_string: str) -> None:
        self._statement = statement
        self.query_string = query_string
        self._connection_ref: "weakref.ref[InstrumentedConnection] | None" = None

    def bind_connection(self, connection: "InstrumentedConnection") -> None:
        """Attach the connection whose subscribers receive this statement's events."""
        self._connection_ref = weakref.ref(connection)

    @property
    def connection(self) -> "InstrumentedConnection":
        """The owning connection.

        Raises:
            ReferenceError: If the statement was never bound or its connection
                has been garbage collected.
        """
        connection = self._connection_ref() if self._connection_ref is not None else None
        if connection is None:
            msg = "statement is not bound to a live connection"
            raise ReferenceError(msg)
        return connection

    @property
    def statement(self) -> "DriverStatementProtocol":
        """The wrapped client statement."""
        return self._statement

    def execute(self, params: "StatementParameters | None" = None) -> bool:
        """Execute the statement and notify the connection's subscribers.

        Args:
            params: Positional or named parameters for this execution. They are
                snapshotted once, and the snapshot is what both the client
                statement and the events receive.

        Returns:
            Whatever the client statement returned.
        """
        connection = self.connection
        params = freeze_parameters(params)
        connection.notify_subscribers(ExecutionStartsEvent(self.query_string))

        try:
            result = self._statement.execute(params)
        except Exception as exc:
            connection.notify_subscribers(ExecutionFailedEvent(exc, params))
            raise

        if result:
            connection.notify_subscribers(ExecutionSucceededEvent(self._statement.row_count(), params))
        else:
            connection.notify_subscribers(ExecutionFailedEvent.from_error(connection, params))

        return result

    def __getattr__(self, name: str) -> Any:
        return getattr(object.__getattribute__(self, "_statement"), name)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._statement)  # type: ignore[call-overload]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(query_string={self.query_string!r})"
