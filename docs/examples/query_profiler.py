"""Query profiler built on the subscriber interfaces.

Tracks duration, row counts, parameters and transaction nesting for every
statement run through an instrumented SQLite connection, then prints a report.

Run with ``python docs/examples/query_profiler.py``.
"""

import re
import time
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from sqlapm import (
    DriverError,
    ExecutionFailedEvent,
    ExecutionFailedSubscriber,
    ExecutionStartsEvent,
    ExecutionStartsSubscriber,
    ExecutionSucceededEvent,
    ExecutionSucceededSubscriber,
    PrepareEvent,
    PrepareSubscriber,
    TransactionBeginEvent,
    TransactionBeginSubscriber,
    TransactionCommitEvent,
    TransactionCommitSubscriber,
    TransactionRollbackEvent,
    TransactionRollbackSubscriber,
)
from sqlapm.adapters.sqlite import SqliteConfig

__all__ = ("ProfiledQuery", "QueryProfiler", "main")

console = Console()


@dataclass
class ProfiledQuery:
    query: str
    duration: float
    rows: int
    params: Any
    in_transaction: bool
    error: "str | None" = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


def truncate_query(query: str, length: int = 100) -> str:
    query = re.sub(r"\s+", " ", query.strip())
    return f"{query[:length]}..." if len(query) > length else query


def format_duration(seconds: float) -> str:
    if seconds < 0.001:
        return f"{seconds * 1_000_000:.2f} µs"
    if seconds < 1:
        return f"{seconds * 1_000:.2f} ms"
    return f"{seconds:.2f} s"


class QueryProfiler(
    ExecutionStartsSubscriber,
    ExecutionSucceededSubscriber,
    ExecutionFailedSubscriber,
    PrepareSubscriber,
    TransactionBeginSubscriber,
    TransactionCommitSubscriber,
    TransactionRollbackSubscriber,
):
    """Times each execution between its start and terminal event."""

    def __init__(self) -> None:
        self.queries: list[ProfiledQuery] = []
        self.transaction_depth = 0
        self._current_query: "str | None" = None
        self._started_at: "float | None" = None

    def execution_starts(self, event: ExecutionStartsEvent) -> None:
        self._current_query = event.query
        self._started_at = time.perf_counter()

    def execution_succeeded(self, event: ExecutionSucceededEvent) -> None:
        self._finish(rows=event.row_count, params=event.params)

    def execution_failed(self, event: ExecutionFailedEvent) -> None:
        self._finish(rows=0, params=event.params, error=event.message)

    def prepare(self, event: PrepareEvent) -> None:
        console.print(Text(f"prepared: {truncate_query(event.query)}", style="dim"))

    def transaction_begin(self, event: TransactionBeginEvent) -> None:
        self.transaction_depth += 1
        console.print(f"transaction started (depth: {self.transaction_depth})")

    def transaction_commit(self, event: TransactionCommitEvent) -> None:
        console.print(f"transaction committed (depth: {self.transaction_depth})")
        self.transaction_depth -= 1

    def transaction_rollback(self, event: TransactionRollbackEvent) -> None:
        console.print(f"transaction rolled back (depth: {self.transaction_depth})")
        self.transaction_depth -= 1

    def _finish(self, rows: int, params: Any, error: "str | None" = None) -> None:
        if self._started_at is None or self._current_query is None:
            return
        self.queries.append(
            ProfiledQuery(
                query=self._current_query,
                duration=time.perf_counter() - self._started_at,
                rows=rows,
                params=params,
                in_transaction=self.transaction_depth > 0,
                error=error,
            )
        )
        self._current_query = None
        self._started_at = None

    def print_report(self) -> None:
        table = Table(title="Query profiling report")
        table.add_column("#", justify="right")
        table.add_column("Status")
        table.add_column("SQL")
        table.add_column("Duration", justify="right")
        table.add_column("Rows / Error")

        for index, query in enumerate(self.queries, start=1):
            status = "ok" if query.succeeded else "failed"
            if query.in_transaction:
                status = f"{status} [txn]"
            outcome = str(query.rows) if query.succeeded else query.error
            table.add_row(
                str(index),
                Text(status),
                Text(truncate_query(query.query)),
                format_duration(query.duration),
                Text(outcome or ""),
            )
        console.print(table)

        succeeded = [query for query in self.queries if query.succeeded]
        total_time = sum(query.duration for query in succeeded)
        console.print(f"Total queries: {len(self.queries)}")
        console.print(f"Successful: {len(succeeded)}")
        console.print(f"Failed: {len(self.queries) - len(succeeded)}")
        console.print(f"Total time: {format_duration(total_time)}")
        if succeeded:
            console.print(f"Average time: {format_duration(total_time / len(succeeded))}")
            slowest = max(succeeded, key=lambda query: query.duration)
            console.print(Text(f"Slowest ({format_duration(slowest.duration)}): {truncate_query(slowest.query)}"))


def main() -> None:
    """Profile a small blog schema workload."""
    profiler = QueryProfiler()
    config = SqliteConfig()

    with config.provide_connection(profiler) as connection:
        connection.exec(
            """
            CREATE TABLE users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                email TEXT UNIQUE NOT NULL
            )
            """
        )
        connection.exec(
            """
            CREATE TABLE posts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL REFERENCES users(id),
                title TEXT NOT NULL,
                content TEXT
            )
            """
        )

        statement = connection.prepare("INSERT INTO users (name, email) VALUES (?, ?)")
        for user in [
            ("Alice Johnson", "alice@example.com"),
            ("Bob Smith", "bob@example.com"),
            ("Carol Davis", "carol@example.com"),
        ]:
            statement.execute(user)

        statement = connection.prepare("INSERT INTO posts (user_id, title, content) VALUES (?, ?, ?)")
        for post in [
            (1, "Getting Started", "Instrumenting connections..."),
            (1, "Advanced SQL Techniques", "Joins, subqueries, and more..."),
            (2, "My First Blog Post", "Hello world!"),
        ]:
            statement.execute(post)

        connection.query("SELECT * FROM users")

        statement = connection.prepare("SELECT * FROM posts WHERE user_id = ?")
        statement.execute([1])

        connection.begin_transaction()
        try:
            connection.exec("INSERT INTO users (name, email) VALUES ('Dave Wilson', 'dave@example.com')")
            connection.exec("UPDATE posts SET title = 'Updated Title' WHERE id = 1")
            connection.commit()
        except DriverError:
            connection.rollback()

        try:
            connection.query("SELECT * FROM non_existent_table")
        except DriverError:
            console.print("caught expected error")

    profiler.print_report()


if __name__ == "__main__":
    main()
