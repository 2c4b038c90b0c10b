from typing import Any

__all__ = (
    "DriverError",
    "DriverWarning",
    "ImproperConfigurationError",
    "IntegrityError",
    "SQLAPMError",
)


class SQLAPMError(Exception):
    """Base exception class from which all SQLAPM exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLAPMError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class DriverError(SQLAPMError):
    """Error reported by the database client.

    ``sqlstate`` is the five character SQLSTATE class/subclass and ``code`` the
    driver specific numeric error code. Either may be ``None`` for errors raised
    by the client itself rather than the database (for example transaction misuse).
    """

    sqlstate: "str | None"
    code: "int | None"

    def __init__(self, message: str, *, sqlstate: "str | None" = None, code: "int | None" = None) -> None:
        super().__init__(detail=message)
        self.sqlstate = sqlstate
        self.code = code


class IntegrityError(DriverError):
    """Constraint violation reported by the database (SQLSTATE class 23)."""


class DriverWarning(UserWarning):
    """Database error reported as a warning when the client runs in warning mode."""


class ImproperConfigurationError(SQLAPMError):
    """Improper Configuration error.

    This exception is raised when a configuration value cannot be interpreted.
    """
