"""Subscriber capability interfaces.

A subscriber opts into an event kind by inheriting the matching interface and
implementing its one handler. Events for kinds it did not opt into are never
offered to it::

    class SlowQueryLog(ExecutionStartsSubscriber, ExecutionSucceededSubscriber):
        def execution_starts(self, event: ExecutionStartsEvent) -> None: ...

        def execution_succeeded(self, event: ExecutionSucceededEvent) -> None: ...
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from mypy_extensions import trait

if TYPE_CHECKING:
    from sqlapm.events import (
        ExecutionFailedEvent,
        ExecutionStartsEvent,
        ExecutionSucceededEvent,
        PrepareEvent,
        TransactionBeginEvent,
        TransactionCommitEvent,
        TransactionRollbackEvent,
    )

__all__ = (
    "ExecutionFailedSubscriber",
    "ExecutionStartsSubscriber",
    "ExecutionSucceededSubscriber",
    "PrepareSubscriber",
    "Subscriber",
    "TransactionBeginSubscriber",
    "TransactionCommitSubscriber",
    "TransactionRollbackSubscriber",
)


class Subscriber(ABC):  # noqa: B024
    """Marker base for every object that can be registered on a connection."""

    __slots__ = ()


@trait
class ExecutionStartsSubscriber(Subscriber):
    __slots__ = ()

    @abstractmethod
    def execution_starts(self, event: "ExecutionStartsEvent") -> None:
        """Called before a statement is sent to the database."""


@trait
class ExecutionSucceededSubscriber(Subscriber):
    __slots__ = ()

    @abstractmethod
    def execution_succeeded(self, event: "ExecutionSucceededEvent") -> None:
        """Called after a statement completed successfully."""


@trait
class ExecutionFailedSubscriber(Subscriber):
    __slots__ = ()

    @abstractmethod
    def execution_failed(self, event: "ExecutionFailedEvent") -> None:
        """Called after a statement failed, before the failure reaches the caller."""


@trait
class PrepareSubscriber(Subscriber):
    __slots__ = ()

    @abstractmethod
    def prepare(self, event: "PrepareEvent") -> None:
        """Called after a statement was prepared."""


@trait
class TransactionBeginSubscriber(Subscriber):
    __slots__ = ()

    @abstractmethod
    def transaction_begin(self, event: "TransactionBeginEvent") -> None: ...


@trait
class TransactionCommitSubscriber(Subscriber):
    __slots__ = ()

    @abstractmethod
    def transaction_commit(self, event: "TransactionCommitEvent") -> None: ...


@trait
class TransactionRollbackSubscriber(Subscriber):
    __slots__ = ()

    @abstractmethod
    def transaction_rollback(self, event: "TransactionRollbackEvent") -> None: ...
