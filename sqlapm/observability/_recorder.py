"""Subscriber that keeps every event it receives, in order."""

from typing import TYPE_CHECKING, Any, TypeVar

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
    from sqlapm.events import (
        Event,
        ExecutionFailedEvent,
        ExecutionStartsEvent,
        ExecutionSucceededEvent,
        PrepareEvent,
        TransactionBeginEvent,
        TransactionCommitEvent,
        TransactionRollbackEvent,
    )

__all__ = ("EventRecorder",)

EventT = TypeVar("EventT", bound="Event")


class EventRecorder(
    ExecutionStartsSubscriber,
    ExecutionSucceededSubscriber,
    ExecutionFailedSubscriber,
    PrepareSubscriber,
    TransactionBeginSubscriber,
    TransactionCommitSubscriber,
    TransactionRollbackSubscriber,
):
    """Collects events for inspection, e.g. in tests or the ``trace`` command."""

    __slots__ = ("events",)

    def __init__(self) -> None:
        self.events: "list[Event]" = []

    @property
    def kinds(self) -> "list[str]":
        return [event.kind for event in self.events]

    def of_type(self, event_type: "type[EventT]") -> "list[EventT]":
        return [event for event in self.events if isinstance(event, event_type)]

    def as_dicts(self) -> "list[dict[str, Any]]":
        return [event.as_dict() for event in self.events]

    def clear(self) -> None:
        self.events.clear()

    def execution_starts(self, event: "ExecutionStartsEvent") -> None:
        self.events.append(event)

    def execution_succeeded(self, event: "ExecutionSucceededEvent") -> None:
        self.events.append(event)

    def execution_failed(self, event: "ExecutionFailedEvent") -> None:
        self.events.append(event)

    def prepare(self, event: "PrepareEvent") -> None:
        self.events.append(event)

    def transaction_begin(self, event: "TransactionBeginEvent") -> None:
        self.events.append(event)

    def transaction_commit(self, event: "TransactionCommitEvent") -> None:
        self.events.append(event)

    def transaction_rollback(self, event: "TransactionRollbackEvent") -> None:
        self.events.append(event)
