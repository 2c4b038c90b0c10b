"""Runtime-checkable protocols describing the wrapped database client.

The instrumentation layer only relies on the operations listed here; every
other attribute of a client object is forwarded untouched.
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sqlapm.typing import ErrorInfo, FailureSentinel, StatementParameters

__all__ = ("DriverConnectionProtocol", "DriverStatementProtocol")


@runtime_checkable
class DriverStatementProtocol(Protocol):
    """A prepared statement produced by a client connection."""

    query_string: str

    def execute(self, params: "StatementParameters | None" = None) -> bool:
        """Execute the statement, returning ``False`` on a non-raising failure."""
        ...

    def row_count(self) -> int:
        """Rows affected (or returned) by the last execution."""
        ...


@runtime_checkable
class DriverConnectionProtocol(Protocol):
    """A client connection with PDO-style failure reporting."""

    def exec(self, sql: str) -> "int | FailureSentinel":
        """Execute ``sql`` and return the number of affected rows."""
        ...

    def prepare(self, sql: str) -> "Any | FailureSentinel":
        """Compile ``sql`` into a :class:`DriverStatementProtocol`."""
        ...

    def query(self, sql: str) -> "Any | FailureSentinel":
        """Prepare and execute ``sql``, returning the executed statement."""
        ...

    def begin_transaction(self) -> bool: ...

    def commit(self) -> bool: ...

    def rollback(self) -> bool: ...

    def error_info(self) -> "ErrorInfo":
        """Error state of the most recent operation."""
        ...
