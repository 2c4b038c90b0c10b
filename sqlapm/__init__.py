"""SQLAPM: lifecycle events for database connections and prepared statements."""

from sqlapm import adapters, events, exceptions, observability, subscribers, typing, utils
from sqlapm.__metadata__ import __version__
from sqlapm.config import InstrumentationConfig
from sqlapm.connection import InstrumentedConnection
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
from sqlapm.exceptions import DriverError, DriverWarning, ImproperConfigurationError, IntegrityError, SQLAPMError
from sqlapm.observability import EventRecorder, LoggingSubscriber
from sqlapm.statement import InstrumentedStatement
from sqlapm.subscribers import (
    ExecutionFailedSubscriber,
    ExecutionStartsSubscriber,
    ExecutionSucceededSubscriber,
    PrepareSubscriber,
    Subscriber,
    TransactionBeginSubscriber,
    TransactionCommitSubscriber,
    TransactionRollbackSubscriber,
)
from sqlapm.typing import ErrorInfo, ErrorMode, StatementParameters

__all__ = (
    "DriverError",
    "DriverWarning",
    "ErrorInfo",
    "ErrorMode",
    "Event",
    "EventRecorder",
    "ExecutionFailedEvent",
    "ExecutionFailedSubscriber",
    "ExecutionStartsEvent",
    "ExecutionStartsSubscriber",
    "ExecutionSucceededEvent",
    "ExecutionSucceededSubscriber",
    "ImproperConfigurationError",
    "InstrumentationConfig",
    "InstrumentedConnection",
    "InstrumentedStatement",
    "IntegrityError",
    "LoggingSubscriber",
    "PrepareEvent",
    "PrepareSubscriber",
    "SQLAPMError",
    "StatementParameters",
    "Subscriber",
    "TransactionBeginEvent",
    "TransactionBeginSubscriber",
    "TransactionCommitEvent",
    "TransactionCommitSubscriber",
    "TransactionRollbackEvent",
    "TransactionRollbackSubscriber",
    "__version__",
    "adapters",
    "events",
    "exceptions",
    "observability",
    "subscribers",
    "typing",
    "utils",
)
