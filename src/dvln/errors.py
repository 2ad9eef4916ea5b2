# src/dvln/errors.py
"""Exceptions carrying a diagnostic code, an output level and an exit value.

Every user-facing failure is raised as (or wrapped into) a `DvlnError` and
rendered exactly once by `dvln.cli.execute()` via `report_error()`.
"""

from .constants import (
    CODE_CLI_PROCESSING,
    CODE_CONFIG_READ,
    CODE_DEFAULT,
    DEFAULT_ERROR_EXIT_VAL,
)


class DvlnError(Exception):
    """Base error: message + numeric code + output level + exit value."""

    level: str = "issue"

    def __init__(
        self,
        message: str,
        code: int = CODE_DEFAULT,
        *,
        level: str | None = None,
        exit_code: int = DEFAULT_ERROR_EXIT_VAL,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.exit_code = exit_code
        if level is not None:
            self.level = level

    def __str__(self) -> str:
        return self.message


class ValidationError(DvlnError):
    """Bad enumerated or numeric setting detected before dispatch."""


class CommandLineError(DvlnError):
    """Flag or subcommand problem found by the authoritative parse."""

    def __init__(self, message: str, code: int = CODE_CLI_PROCESSING) -> None:
        super().__init__(message, code)


class ConfigReadError(DvlnError):
    level = "fatal"

    def __init__(self, message: str, code: int = CODE_CONFIG_READ) -> None:
        super().__init__(message, code)


class FatalError(DvlnError):
    level = "fatal"


class SettingNotFoundError(KeyError):
    """Raised by `SettingRegistry.describe()` for a name never registered."""


def wrap_error(
    err: BaseException, context: str, code: int, *, level: str | None = None
) -> DvlnError:
    """Wrap a lower level exception with added context and a code.

    The result keeps the original as `__cause__` when raised with `from`.
    """
    if isinstance(err, DvlnError):
        wrapped = type(err).__new__(type(err))
        DvlnError.__init__(
            wrapped,
            f"{context}\n{err.message}",
            code,
            level=level or err.level,
            exit_code=err.exit_code,
        )
        return wrapped
    return DvlnError(f"{context}\n{type(err).__name__}: {err}", code, level=level)
