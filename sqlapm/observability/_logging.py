"""Subscriber that writes every lifecycle event to the ``sqlapm.events`` logger."""

import logging
from typing import TYPE_CHECKING, Any

from sqlapm.subscribers import (
    ExecutionFailedSubscriber,
    ExecutionStartsSubscriber,
    ExecutionSucceededSubscriber,
    PrepareSubscriber,
    TransactionBeginSubscriber,
    TransactionCommitSubscriber,
    TransactionRollbackSubscriber,
)
from sqlapm.utils.logging import EVENTS_LOGGER_NAME, get_logger, log_with_context

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

__all__ = ("LoggingSubscriber", "format_event")


def format_event(event: "Event") -> str:
    """Create a concise human-readable representation of an event."""

    return _format_fields(event.as_dict())


def _format_fields(fields: "dict[str, Any]") -> str:
    kind = fields.get("kind", "event")
    details = " ".join(f"{key}={value!r}" for key, value in fields.items() if key != "kind" and value is not None)
    return f"{kind} {details}".rstrip()


class LoggingSubscriber(
    ExecutionStartsSubscriber,
    ExecutionSucceededSubscriber,
    ExecutionFailedSubscriber,
    PrepareSubscriber,
    TransactionBeginSubscriber,
    TransactionCommitSubscriber,
    TransactionRollbackSubscriber,
):
    """Log each event with its payload attached as structured ``extra_fields``.

    Starts, prepares and transaction events are logged at ``DEBUG``, successes at
    ``INFO`` and failures at ``WARNING``. Statement parameters are only included
    when ``include_parameters`` is set.
    """

    __slots__ = ("include_parameters", "logger")

    def __init__(self, logger: "logging.Logger | None" = None, include_parameters: bool = False) -> None:
        self.logger = logger or get_logger(EVENTS_LOGGER_NAME)
        self.include_parameters = include_parameters

    def _log(self, level: int, event: "Event") -> None:
        fields = event.as_dict()
        if not self.include_parameters:
            fields.pop("params", None)
        log_with_context(self.logger, level, _format_fields(fields), **fields)

    def execution_starts(self, event: "ExecutionStartsEvent") -> None:
        self._log(logging.DEBUG, event)

    def execution_succeeded(self, event: "ExecutionSucceededEvent") -> None:
        self._log(logging.INFO, event)

    def execution_failed(self, event: "ExecutionFailedEvent") -> None:
        self._log(logging.WARNING, event)

    def prepare(self, event: "PrepareEvent") -> None:
        self._log(logging.DEBUG, event)

    def transaction_begin(self, event: "TransactionBeginEvent") -> None:
        self._log(logging.DEBUG, event)

    def transaction_commit(self, event: "TransactionCommitEvent") -> None:
        self._log(logging.DEBUG, event)

    def transaction_rollback(self, event: "TransactionRollbackEvent") -> None:
        self._log(logging.DEBUG, event)
