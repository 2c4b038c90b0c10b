from typing import TYPE_CHECKING

import rich_click as click
from rich import get_console
from rich.table import Table
from rich.text import Text

from sqlapm._serialization import encode_json
from sqlapm.adapters.sqlite import SqliteConfig
from sqlapm.config import InstrumentationConfig
from sqlapm.exceptions import DriverError
from sqlapm.observability import EventRecorder
from sqlapm.typing import ErrorMode
from sqlapm.utils.logging import LOG_FORMATS, configure_logging

if TYPE_CHECKING:
    from click import Group

__all__ = ("get_sqlapm_group", "main")


def _render_table(recorder: EventRecorder) -> Table:
    table = Table(title="Event trace")
    table.add_column("#", justify="right")
    table.add_column("Event", no_wrap=True)
    table.add_column("Details")
    for index, payload in enumerate(recorder.as_dicts(), start=1):
        kind = payload.pop("kind")
        details = ", ".join(f"{key}={value!r}" for key, value in payload.items() if value is not None)
        table.add_row(str(index), kind, Text(details))
    return table


def get_sqlapm_group() -> "Group":
    """Get the SQLAPM CLI group.

    Returns:
        The SQLAPM CLI group.
    """

    @click.group(name="sqlapm")
    def sqlapm_group() -> None:
        """SQLAPM command line tools."""

    @sqlapm_group.command(name="trace")
    @click.option("--database", default=":memory:", show_default=True, help="SQLite database path or URI.")
    @click.option(
        "--error-mode",
        type=click.Choice([mode.value for mode in ErrorMode]),
        default=ErrorMode.EXCEPTION.value,
        show_default=True,
        help="How the client reports failures.",
    )
    @click.option("--json", "as_json", is_flag=True, default=False, help="Print one JSON object per event.")
    @click.option(
        "--log-level",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
        default=None,
        help="Also log each event to stderr at this level and above.",
    )
    @click.option(
        "--log-format", type=click.Choice(LOG_FORMATS), default="structured", show_default=True, help="Log line format."
    )
    @click.argument("statements", nargs=-1, required=True)
    @click.pass_context
    def trace_command(
        ctx: "click.Context",
        database: str,
        error_mode: str,
        as_json: bool,
        log_level: "str | None",
        log_format: str,
        statements: "tuple[str, ...]",
    ) -> None:
        """Run STATEMENTS against an instrumented SQLite connection and print the events."""
        console = get_console()
        recorder = EventRecorder()
        if log_level is not None:
            configure_logging(log_level, log_format)
        config = SqliteConfig(
            connection_config={"database": database},
            error_mode=error_mode,
            instrumentation=InstrumentationConfig(log_events=log_level is not None),
        )

        failures = 0
        with config.provide_connection(recorder) as connection:
            for sql in statements:
                try:
                    result = connection.query(sql)
                except DriverError as exc:
                    failures += 1
                    if not as_json:
                        console.print(Text(str(exc), style="red"))
                    continue
                if result is False:
                    failures += 1

        if as_json:
            for payload in recorder.as_dicts():
                click.echo(encode_json(payload))
        else:
            console.print(_render_table(recorder))

        if failures:
            ctx.exit(1)

    return sqlapm_group


def main() -> None:
    get_sqlapm_group()()
