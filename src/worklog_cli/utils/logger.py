"""Application logging.

Every module logs through a child of the ``worklog_cli`` logger, so a
single rotating file under ``user_log_dir`` collects store mutations,
imports and command timings. The file handler is attached the first time
any of them is requested through :func:`get_logger`.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path

from platformdirs import user_log_dir

APP_LOGGER = "worklog_cli"
LOG_FILE = "worklog.log"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3

_logger: logging.Logger | None = None


def log_file_path() -> Path:
    return Path(user_log_dir(APP_LOGGER)) / LOG_FILE


def _configure() -> logging.Logger:
    global _logger
    if _logger is not None:
        return _logger

    path = log_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=_MAX_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )

    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(logging.DEBUG)
    if not logger.handlers:
        logger.addHandler(handler)
    # Keep log lines off the terminal
    logger.propagate = False

    _logger = logger
    return _logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the application logger, or the child logger for *name*.

    Args:
        name: Dotted module name, usually ``__name__``. Names outside the
            ``worklog_cli`` namespace are nested under it.
    """
    root = _configure()
    if not name or name == APP_LOGGER:
        return root
    if not name.startswith(APP_LOGGER + "."):
        name = f"{APP_LOGGER}.{name}"
    return logging.getLogger(name)
