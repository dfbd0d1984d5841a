# === FILE: site_walker/logger.py ===
"""Logging for **SiteWalker**.

Every record carries a ``task`` field: the name of the asyncio task that
emitted it (``crawler-1``, ``crawler-2``, …) or ``main`` outside the worker
pool, so interleaved lines from concurrent fetches can be told apart::

    12:00:01 | DEBUG    | crawler-3 | Processed http://site.test/a - ...

Modules log through :data:`logger`; the CLI calls :func:`configure` with its
``--log-*`` options.
"""
from __future__ import annotations

import asyncio
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(task)s | %(message)s"
LOGGER_NAME: Final[str] = "SiteWalker"
MAIN_TASK: Final[str] = "main"

# Rotation for --log-file; long crawls at DEBUG produce a line per page.
LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3


class TaskNameFilter(logging.Filter):
    """Stamps each record with the name of the current asyncio task."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            task = asyncio.current_task()
        except RuntimeError:
            task = None
        record.task = task.get_name() if task is not None else MAIN_TASK
        return True


def _handler(handler: logging.Handler, fmt: str) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt))
    handler.addFilter(TaskNameFilter())
    return handler


def configure(
    *,
    level: Union[int, str] = "WARNING",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Replaces the handlers of the project logger.

    Output always goes to stdout; *log_file* adds a rotating file whose
    parent directory is created if needed.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)

    for old in list(lg.handlers):
        lg.removeHandler(old)
        old.close()

    lg.addHandler(_handler(logging.StreamHandler(sys.stdout), log_format))
    if log_file is not None:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        lg.addHandler(
            _handler(
                RotatingFileHandler(
                    str(log_file),
                    maxBytes=LOG_FILE_MAX_BYTES,
                    backupCount=LOG_FILE_BACKUPS,
                    encoding="utf-8",
                ),
                log_format,
            )
        )

    lg.propagate = False
    return lg


logger: logging.Logger = configure()

__all__ = ["logger", "configure", "TaskNameFilter", "DEFAULT_FORMAT", "LOGGER_NAME", "MAIN_TASK"]
