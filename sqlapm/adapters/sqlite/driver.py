"""PDO-style SQLite client built on :mod:`sqlite3`.

The connection runs in autocommit mode and manages transactions explicitly.
Failures are reported according to :class:`~sqlapm.typing.ErrorMode`: raised
as :class:`~sqlapm.exceptions.DriverError`, returned as ``False`` with a
:class:`~sqlapm.exceptions.DriverWarning`, or returned as ``False`` silently.
The error state of the last operation is always available from
:meth:`SqliteConnection.error_info`.
"""

import re
import sqlite3
import warnings
from collections.abc import Callable, Iterator, Mapping
from typing import TYPE_CHECKING, Any, Literal, NamedTuple

from sqlapm.exceptions import DriverError, DriverWarning, IntegrityError
from sqlapm.typing import SQLSTATE_SUCCESS, ErrorInfo, ErrorMode
from sqlapm.utils.dispatch import TypeDispatcher
from sqlapm.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlapm.typing import StatementParameters

__all__ = ("SqliteConnection", "SqliteStatement", "resolve_rowcount")

logger = get_logger("adapters.sqlite")

SQLITE_ERROR = 1
_SQLITE_ERRORS = (sqlite3.Error, sqlite3.Warning)
_NO_ERROR = ErrorInfo(SQLSTATE_SUCCESS, None, None)
_LEADING_COMMENTS = re.compile(r"\A(?:\s+|--[^\n]*(?:\n|$)|/\*.*?(?:\*/|$))*", re.DOTALL)
_EXPLAIN_KEYWORD = re.compile(r"EXPLAIN\b", re.IGNORECASE)


class _ErrorClass(NamedTuple):
    sqlstate: str
    description: str
    error_type: "type[DriverError]"


_GENERAL_ERROR = _ErrorClass("HY000", "General error", DriverError)

_error_classes = TypeDispatcher[_ErrorClass]()
_error_classes.register(sqlite3.Error, _GENERAL_ERROR)
_error_classes.register(sqlite3.Warning, _GENERAL_ERROR)
_error_classes.register(sqlite3.IntegrityError, _ErrorClass("23000", "Integrity constraint violation", IntegrityError))


def resolve_rowcount(cursor: Any) -> int:
    """Return the affected row count of ``cursor``, ``0`` when unknown."""
    rowcount = getattr(cursor, "rowcount", None)
    if rowcount is None or rowcount < 0:
        return 0
    return int(rowcount)


def _dict_row_factory(cursor: sqlite3.Cursor, row: "tuple[Any, ...]") -> "dict[str, Any]":
    return {column[0]: value for column, value in zip(cursor.description, row)}


def _bind_parameters(params: "StatementParameters | None") -> "tuple[Any, ...] | dict[str, Any]":
    if params is None:
        return ()
    if isinstance(params, Mapping):
        return dict(params)
    return tuple(params)


def _explain(sql: str) -> str:
    if _EXPLAIN_KEYWORD.match(_LEADING_COMMENTS.sub("", sql, count=1)):
        return sql
    return f"EXPLAIN {sql}"


class SqliteStatement:
    """A compiled statement bound to a :class:`SqliteConnection`."""

    __slots__ = ("_connection", "_cursor", "_row_count", "query_string")

    def __init__(self, connection: "SqliteConnection", query_string: str) -> None:
        self._connection = connection
        self.query_string = query_string
        self._cursor: "sqlite3.Cursor | None" = None
        self._row_count = 0

    def execute(self, params: "StatementParameters | None" = None) -> bool:
        """Run the statement with ``params``.

        Returns:
            ``True`` on success, ``False`` on failure outside exception mode.
        """
        self.close_cursor()
        try:
            cursor = self._connection.raw_connection.execute(self.query_string, _bind_parameters(params))
        except _SQLITE_ERRORS as exc:
            self._row_count = 0
            return self._connection.handle_error(exc)

        self._cursor = cursor
        self._row_count = resolve_rowcount(cursor)
        self._connection.record_success(cursor)
        return True

    def row_count(self) -> int:
        return self._row_count

    def column_count(self) -> int:
        if self._cursor is None or self._cursor.description is None:
            return 0
        return len(self._cursor.description)

    def fetch(self) -> "dict[str, Any] | None":
        """Next result row as a dict, or ``None`` when exhausted."""
        if self._cursor is None:
            return None
        return self._cursor.fetchone()

    def fetch_all(self) -> "list[dict[str, Any]]":
        if self._cursor is None:
            return []
        return self._cursor.fetchall()

    def fetch_column(self, index: int = 0) -> Any:
        """Value of column ``index`` in the next row, or ``None`` when exhausted."""
        row = self.fetch()
        if row is None:
            return None
        return list(row.values())[index]

    def close_cursor(self) -> bool:
        if self._cursor is not None:
            self._cursor.close()
            self._cursor = None
        return True

    def error_info(self) -> ErrorInfo:
        return self._connection.error_info()

    def __iter__(self) -> "Iterator[dict[str, Any]]":
        if self._cursor is None:
            return iter(())
        return iter(self._cursor)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(query_string={self.query_string!r})"


class SqliteConnection:
    """SQLite connection with PDO-style error reporting."""

    __slots__ = ("_connection", "_error_info", "_last_insert_id", "error_mode")

    def __init__(
        self, database: str = ":memory:", *, error_mode: "ErrorMode | str" = ErrorMode.EXCEPTION, **connect_kwargs: Any
    ) -> None:
        connect_kwargs["isolation_level"] = None
        self._connection = sqlite3.connect(database, **connect_kwargs)
        self._connection.row_factory = _dict_row_factory
        self.error_mode = ErrorMode.coerce(error_mode)
        self._error_info = _NO_ERROR
        self._last_insert_id: "int | None" = None

    @property
    def raw_connection(self) -> sqlite3.Connection:
        """The underlying :mod:`sqlite3` connection."""
        return self._connection

    @property
    def in_transaction(self) -> bool:
        return self._connection.in_transaction

    def set_error_mode(self, error_mode: "ErrorMode | str") -> None:
        self.error_mode = ErrorMode.coerce(error_mode)

    def error_info(self) -> ErrorInfo:
        """``(sqlstate, code, message)`` of the last operation."""
        return self._error_info

    def error_code(self) -> str:
        return self._error_info.sqlstate

    def last_insert_id(self) -> "int | None":
        return self._last_insert_id

    def exec(self, sql: str) -> "int | Literal[False]":
        """Execute a single statement and return the number of affected rows."""
        try:
            cursor = self._connection.execute(sql)
        except _SQLITE_ERRORS as exc:
            return self.handle_error(exc)

        try:
            self.record_success(cursor)
            return resolve_rowcount(cursor)
        finally:
            cursor.close()

    def prepare(self, sql: str) -> "SqliteStatement | Literal[False]":
        """Compile ``sql`` without running it.

        Compilation goes through ``EXPLAIN`` with no bindings: a complaint about
        the number of bindings means the statement compiled and only needs
        parameters.
        """
        try:
            self._connection.execute(_explain(sql)).close()
        except sqlite3.ProgrammingError as exc:
            if "bindings" not in str(exc):
                return self.handle_error(exc)
        except _SQLITE_ERRORS as exc:
            return self.handle_error(exc)

        self._error_info = _NO_ERROR
        return SqliteStatement(self, sql)

    def query(self, sql: str) -> "SqliteStatement | Literal[False]":
        """Prepare and execute ``sql``, returning the executed statement."""
        statement = self.prepare(sql)
        if statement is False:
            return False
        if not statement.execute():
            return False
        return statement

    def begin_transaction(self) -> bool:
        if self._connection.in_transaction:
            msg = "There is already an active transaction"
            raise DriverError(msg)
        return self._control("BEGIN")

    def commit(self) -> bool:
        if not self._connection.in_transaction:
            msg = "There is no active transaction"
            raise DriverError(msg)
        return self._control("COMMIT")

    def rollback(self) -> bool:
        if not self._connection.in_transaction:
            msg = "There is no active transaction"
            raise DriverError(msg)
        return self._control("ROLLBACK")

    def create_function(
        self, name: str, num_params: int, func: "Callable[..., Any]", *, deterministic: bool = False
    ) -> None:
        """Register a Python callable as an SQL function."""
        self._connection.create_function(name, num_params, func, deterministic=deterministic)

    def close(self) -> None:
        self._connection.close()

    def record_success(self, cursor: "sqlite3.Cursor | None" = None) -> None:
        """Reset the error state after a successful operation."""
        self._error_info = _NO_ERROR
        if cursor is not None and cursor.lastrowid:
            self._last_insert_id = cursor.lastrowid

    def handle_error(self, error: Exception) -> Literal[False]:
        """Record ``error`` and report it according to the error mode.

        Raises:
            DriverError: In exception mode, chained from ``error``.

        Returns:
            ``False`` in silent and warning modes.
        """
        error_class = _error_classes.get(error) or _GENERAL_ERROR
        code = getattr(error, "sqlite_errorcode", SQLITE_ERROR)
        message = str(error)
        self._error_info = ErrorInfo(error_class.sqlstate, code, message)
        text = f"SQLSTATE[{error_class.sqlstate}]: {error_class.description}: {code} {message}"

        if self.error_mode is ErrorMode.EXCEPTION:
            raise error_class.error_type(text, sqlstate=error_class.sqlstate, code=code) from error
        if self.error_mode is ErrorMode.WARNING:
            warnings.warn(text, DriverWarning, stacklevel=3)
        logger.debug("SQLite operation failed: %s", text)
        return False

    def _control(self, sql: str) -> bool:
        try:
            self._connection.execute(sql).close()
        except _SQLITE_ERRORS as exc:
            return self.handle_error(exc)
        self._error_info = _NO_ERROR
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}(error_mode={self.error_mode})"
