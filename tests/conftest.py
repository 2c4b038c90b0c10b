import logging
import time
from collections.abc import Generator
from unittest.mock import Mock

import pytest

from sqlapm import ErrorInfo, InstrumentedConnection
from sqlapm.adapters.sqlite import SqliteConnection
from sqlapm.observability import EventRecorder
from sqlapm.typing import ErrorMode


def usleep(microseconds: int) -> None:
    time.sleep(microseconds / 1_000_000)


@pytest.fixture(autouse=True)
def _restore_sqlapm_logging() -> Generator[None, None, None]:
    package_logger = logging.getLogger("sqlapm")
    handlers, level, propagate = list(package_logger.handlers), package_logger.level, package_logger.propagate
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
    package_logger.propagate = propagate


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def driver_connection() -> Mock:
    """Client connection double whose operations all succeed."""
    driver = Mock(
        spec=["exec", "prepare", "query", "begin_transaction", "commit", "rollback", "error_info", "close"]
    )
    driver.exec.return_value = 0
    driver.begin_transaction.return_value = True
    driver.commit.return_value = True
    driver.rollback.return_value = True
    driver.error_info.return_value = ErrorInfo("HY000", 1, "no such table: not_a_table")
    return driver


def create_sqlite(error_mode: ErrorMode = ErrorMode.EXCEPTION) -> SqliteConnection:
    connection = SqliteConnection(":memory:", error_mode=error_mode)
    connection.create_function("USLEEP", 1, usleep)
    return connection


@pytest.fixture
def sqlite_connection() -> Generator[SqliteConnection, None, None]:
    connection = create_sqlite()
    yield connection
    connection.close()


@pytest.fixture
def instrumented() -> Generator[InstrumentedConnection, None, None]:
    connection = InstrumentedConnection(create_sqlite())
    yield connection
    connection.close()


@pytest.fixture
def silent_instrumented() -> Generator[InstrumentedConnection, None, None]:
    connection = InstrumentedConnection(create_sqlite(ErrorMode.SILENT))
    yield connection
    connection.close()


@pytest.fixture
def warning_instrumented() -> Generator[InstrumentedConnection, None, None]:
    connection = InstrumentedConnection(create_sqlite(ErrorMode.WARNING))
    yield connection
    connection.close()
