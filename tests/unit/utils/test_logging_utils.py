"""Tests for the logging helpers."""

import io
import logging
import sys

import pytest

from sqlapm._serialization import decode_json
from sqlapm.utils.logging import (
    StructuredFormatter,
    configure_logging,
    get_logger,
    log_with_context,
)


def _record(message: str = "hello", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="sqlapm.test", level=logging.INFO, pathname=__file__, lineno=10, msg=message, args=(), exc_info=None
    )
    record.__dict__.update(extra)
    return record


def test_get_logger_prefixes_names() -> None:
    assert get_logger().name == "sqlapm"
    assert get_logger("sqlapm").name == "sqlapm"
    assert get_logger("connection").name == "sqlapm.connection"
    assert get_logger("sqlapm.events").name == "sqlapm.events"
    assert get_logger("sqlapmx").name == "sqlapm.sqlapmx"


def test_structured_formatter_outputs_json() -> None:
    record = _record(extra_fields={"kind": "execution_starts", "query": "SELECT 1"})

    payload = decode_json(StructuredFormatter().format(record))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "sqlapm.test"
    assert payload["kind"] == "execution_starts"
    assert payload["query"] == "SELECT 1"


def test_structured_formatter_serializes_unusual_values() -> None:
    record = _record(extra_fields={"error": ValueError("bad"), "params": (1, "a")})

    payload = decode_json(StructuredFormatter().format(record))

    assert payload["error"] == "ValueError: bad"
    assert payload["params"] == [1, "a"]


def test_structured_formatter_includes_exception() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord(
            name="sqlapm.test",
            level=logging.ERROR,
            pathname=__file__,
            lineno=10,
            msg="failed",
            args=(),
            exc_info=sys.exc_info(),
        )

    payload = decode_json(StructuredFormatter().format(record))

    assert "RuntimeError: boom" in payload["exception"]


def test_configure_logging_structured() -> None:
    stream = io.StringIO()

    handler = configure_logging(level="info", stream=stream)
    log_with_context(get_logger("connection"), logging.INFO, "statement.done", rows=3)

    package_logger = logging.getLogger("sqlapm")
    assert package_logger.level == logging.INFO
    assert package_logger.propagate is False
    assert handler in package_logger.handlers
    payload = decode_json(stream.getvalue().splitlines()[-1])
    assert payload["message"] == "statement.done"
    assert payload["logger"] == "sqlapm.connection"
    assert payload["rows"] == 3


def test_configure_logging_simple() -> None:
    stream = io.StringIO()

    configure_logging(level="WARNING", format_style="simple", stream=stream)
    get_logger("connection").info("hidden")
    get_logger("connection").warning("shown")

    assert stream.getvalue().count("\n") == 1
    assert "WARNING sqlapm.connection: shown" in stream.getvalue()


def test_configure_logging_replaces_its_previous_handler() -> None:
    first = configure_logging(stream=io.StringIO())
    second = configure_logging(stream=io.StringIO())

    handlers = logging.getLogger("sqlapm").handlers
    assert second in handlers
    assert first not in handlers


def test_configure_logging_rejects_unknown_format() -> None:
    with pytest.raises(ValueError, match="Unknown log format 'xml'"):
        configure_logging(format_style="xml")


def test_log_with_context(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("context")
    caplog.set_level(logging.INFO, logger="sqlapm.context")

    log_with_context(logger, logging.INFO, "statement.done", rows=3)
    log_with_context(logger, logging.DEBUG, "statement.hidden")

    assert [record.getMessage() for record in caplog.records] == ["statement.done"]
    assert caplog.records[0].__dict__["extra_fields"] == {"rows": 3}
