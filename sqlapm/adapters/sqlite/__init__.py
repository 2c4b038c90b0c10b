"""SQLite adapter for SQLAPM."""

from sqlapm.adapters.sqlite.config import SqliteConfig, SqliteConnectionParams
from sqlapm.adapters.sqlite.driver import SqliteConnection, SqliteStatement

__all__ = ("SqliteConfig", "SqliteConnection", "SqliteConnectionParams", "SqliteStatement")
