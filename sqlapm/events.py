"""Execution lifecycle events.

Each event is an immutable value that knows which subscriber capability it
belongs to. :meth:`Event.deliver` checks the subscriber for that capability and
calls its single handler; subscribers without the capability are skipped.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar

from sqlapm.exceptions import DriverError
from sqlapm.subscribers import (
    ExecutionFailedSubscriber,
    ExecutionStartsSubscriber,
    ExecutionSucceededSubscriber,
    PrepareSubscriber,
    TransactionBeginSubscriber,
    TransactionCommitSubscriber,
    TransactionRollbackSubscriber,
)

if TYPE_CHECKING:
    from sqlapm.subscribers import Subscriber
    from sqlapm.typing import StatementParameters

__all__ = (
    "Event",
    "ExecutionFailedEvent",
    "ExecutionStartsEvent",
    "ExecutionSucceededEvent",
    "PrepareEvent",
    "TransactionBeginEvent",
    "TransactionCommitEvent",
    "TransactionRollbackEvent",
    "freeze_parameters",
)


def freeze_parameters(params: "StatementParameters | None") -> "StatementParameters | None":
    """Snapshot statement parameters so later caller mutations are not observed.

    Mappings become read-only views over a private copy, any other iterable
    becomes a tuple.
    """
    if params is None:
        return None
    if isinstance(params, Mapping):
        return MappingProxyType(dict(params))
    return tuple(params)


class Event(ABC):
    """A single moment in the lifecycle of a database interaction."""

    __slots__ = ()

    kind: ClassVar[str]

    @abstractmethod
    def deliver(self, subscriber: "Subscriber") -> None:
        """Hand this event to ``subscriber`` if it subscribes to this kind."""

    def as_dict(self) -> "dict[str, Any]":
        """Return the event payload as a dictionary."""
        return {"kind": self.kind}


@dataclass(frozen=True, slots=True)
class ExecutionStartsEvent(Event):
    """A statement is about to be sent to the database."""

    kind: ClassVar[str] = "execution_starts"

    query: str

    def deliver(self, subscriber: "Subscriber") -> None:
        if isinstance(subscriber, ExecutionStartsSubscriber):
            subscriber.execution_starts(self)

    def as_dict(self) -> "dict[str, Any]":
        return {"kind": self.kind, "query": self.query}


@dataclass(frozen=True, slots=True)
class ExecutionSucceededEvent(Event):
    """The database finished a statement without error."""

    kind: ClassVar[str] = "execution_succeeded"

    row_count: int
    params: "StatementParameters | None" = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", freeze_parameters(self.params))

    def deliver(self, subscriber: "Subscriber") -> None:
        if isinstance(subscriber, ExecutionSucceededSubscriber):
            subscriber.execution_succeeded(self)

    def as_dict(self) -> "dict[str, Any]":
        return {"kind": self.kind, "row_count": self.row_count, "params": self.params}


@dataclass(frozen=True, slots=True)
class ExecutionFailedEvent(Event):
    """A statement failed, either by raising or by returning a failure value.

    Both origins expose the same error shape: ``state`` (SQLSTATE), ``code``
    (driver error code) and ``message``.
    """

    kind: ClassVar[str] = "execution_failed"

    exception: BaseException
    params: "StatementParameters | None" = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", freeze_parameters(self.params))

    @classmethod
    def from_error(cls, connection: Any, params: "StatementParameters | None" = None) -> "ExecutionFailedEvent":
        """Build the event from the error state recorded on ``connection``.

        Used when the client reported failure through its return value rather
        than by raising.

        Args:
            connection: Any object exposing ``error_info()``.
            params: Parameters of the failed execution, if any.

        Returns:
            The failure event.
        """
        state, code, message = connection.error_info()
        return cls(DriverError(f"SQLSTATE[{state}]: {message}", sqlstate=state, code=code), params)

    @property
    def state(self) -> "str | None":
        return getattr(self.exception, "sqlstate", None)

    @property
    def code(self) -> "int | None":
        return getattr(self.exception, "code", None)

    @property
    def message(self) -> str:
        return str(self.exception)

    def deliver(self, subscriber: "Subscriber") -> None:
        if isinstance(subscriber, ExecutionFailedSubscriber):
            subscriber.execution_failed(self)

    def as_dict(self) -> "dict[str, Any]":
        return {
            "kind": self.kind,
            "state": self.state,
            "code": self.code,
            "message": self.message,
            "params": self.params,
        }


@dataclass(frozen=True, slots=True)
class PrepareEvent(Event):
    """A statement was compiled by the database."""

    kind: ClassVar[str] = "prepare"

    query: str

    def deliver(self, subscriber: "Subscriber") -> None:
        if isinstance(subscriber, PrepareSubscriber):
            subscriber.prepare(self)

    def as_dict(self) -> "dict[str, Any]":
        return {"kind": self.kind, "query": self.query}


@dataclass(frozen=True, slots=True)
class TransactionBeginEvent(Event):
    kind: ClassVar[str] = "transaction_begin"

    def deliver(self, subscriber: "Subscriber") -> None:
        if isinstance(subscriber, TransactionBeginSubscriber):
            subscriber.transaction_begin(self)


@dataclass(frozen=True, slots=True)
class TransactionCommitEvent(Event):
    kind: ClassVar[str] = "transaction_commit"

    def deliver(self, subscriber: "Subscriber") -> None:
        if isinstance(subscriber, TransactionCommitSubscriber):
            subscriber.transaction_commit(self)


@dataclass(frozen=True, slots=True)
class TransactionRollbackEvent(Event):
    kind: ClassVar[str] = "transaction_rollback"

    def deliver(self, subscriber: "Subscriber") -> None:
        if isinstance(subscriber, TransactionRollbackSubscriber):
            subscriber.transaction_rollback(self)
