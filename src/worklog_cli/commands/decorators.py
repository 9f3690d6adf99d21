"""Decorators for command functions."""

import functools
import time
import traceback
from collections.abc import Callable

import typer

from worklog_cli.services.data_service import DataImportError
from worklog_cli.utils.exit_codes import (
    ERROR_GENERAL,
    ERROR_INVALID_DATA,
    ERROR_STORAGE,
    get_exit_code_name,
)
from worklog_cli.utils.logger import get_logger
from worklog_cli.utils.ui.formatters import format_error


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


def command_wrapper(func: Callable):
    """Wrap a command with logging and uniform error reporting.

    ``AppError`` and rejected imports become an error message plus their exit
    code; storage failures exit with ``ERROR_STORAGE``; anything else is
    logged with its traceback and exits with 1.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger(f"{__package__}.{func.__name__}")
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)

        def failed(code: int, message: str, with_traceback: bool = False) -> typer.Exit:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) %s - %s%s",
                cmd,
                elapsed,
                get_exit_code_name(code),
                message,
                "\n" + traceback.format_exc() if with_traceback else "",
            )
            return typer.Exit(code=code)

        try:
            result = func(*args, **kwargs)
            elapsed = time.monotonic() - start
            logger.info("command completed: %s (%.3fs)", cmd, elapsed)
            return result

        except (AppError, DataImportError) as e:
            code = e.exit_code if isinstance(e, AppError) else ERROR_INVALID_DATA
            format_error(str(e))
            raise failed(code, str(e)) from e

        except (typer.Exit, typer.Abort):
            # Re-raise Typer's own exits (like --help, explicit Exit(0) or a declined prompt)
            raise

        except (RuntimeError, OSError) as e:
            format_error(str(e))
            raise failed(ERROR_STORAGE, str(e), with_traceback=True) from e

        except Exception as e:
            format_error(f"An unexpected error occurred: {str(e)}")
            raise failed(ERROR_GENERAL, str(e), with_traceback=True) from e

    return wrapper
