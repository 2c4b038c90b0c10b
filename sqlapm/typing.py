"""Shared types for the database client contract."""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, Literal, NamedTuple, Union

from typing_extensions import TypeAlias

from sqlapm.exceptions import ImproperConfigurationError

__all__ = ("SQLSTATE_SUCCESS", "ErrorInfo", "ErrorMode", "FailureSentinel", "StatementParameters")

SQLSTATE_SUCCESS = "00000"

StatementParameters: TypeAlias = Union[Sequence[Any], Mapping[str, Any]]
"""Positional or named parameters bound to a statement execution."""

FailureSentinel: TypeAlias = Literal[False]
"""Value returned by a client operation that failed without raising."""


class ErrorInfo(NamedTuple):
    """Error state of the last operation on a connection or statement."""

    sqlstate: str
    code: "int | None"
    message: "str | None"

    @property
    def is_error(self) -> bool:
        return self.sqlstate != SQLSTATE_SUCCESS


class ErrorMode(Enum):
    """How a database client reports failures."""

    SILENT = "silent"
    """Return ``False`` and record the error state."""
    WARNING = "warning"
    """Like ``SILENT``, and additionally emit a :class:`~sqlapm.exceptions.DriverWarning`."""
    EXCEPTION = "exception"
    """Raise :class:`~sqlapm.exceptions.DriverError`."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, value: "ErrorMode | str") -> "ErrorMode":
        """Resolve an error mode from a member or its (case-insensitive) name.

        Raises:
            ImproperConfigurationError: If ``value`` does not name an error mode.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            msg = f"Unknown error mode {value!r}, expected one of: {choices}"
            raise ImproperConfigurationError(msg) from None
