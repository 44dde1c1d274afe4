"""
Logging setup for awsugar.

Diagnostics go to stderr through a Rich handler so they never interleave
with the cleanup report printed on stdout. ``--log-file`` adds a plain
timestamped copy, handy when a long snapshot wait runs unattended.

Example
-------
>>> setup_logging(level="DEBUG", log_file="awsugar.log")
>>> logging.getLogger("awsugar.core.waiter").debug("Polling snapshot")
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# boto logs every retry and request at INFO/DEBUG
NOISY_LOGGERS = ("boto3", "botocore", "urllib3", "s3transfer")

Level = Union[str, int]


def _parse_level(level: Level) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: Level = "WARNING",
    log_file: Optional[str] = None,
    rich_tracebacks: bool = True,
    console: Optional[Console] = None,
) -> None:
    """
    Install the awsugar log handlers on the root logger.

    Any handler already present on the root logger is removed first, so
    calling it twice does not duplicate output.

    Parameters
    ----------
    level : str or int, default="WARNING"
        Threshold for every handler.
    log_file : str, optional
        Also append records to this file.
    rich_tracebacks : bool, default=True
        Render exception tracebacks with Rich.
    console : Console, optional
        Console to log to; a stderr console by default.
    """
    level = _parse_level(level)

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    # Keep "[vol-123]" literal
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=rich_tracebacks,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    root.debug(f"Logging at {logging.getLevelName(level)} (file={log_file})")


class LogContext:
    """
    Temporarily change the level of one logger.

    Example
    -------
    >>> with LogContext(logging.getLogger("awsugar.core.waiter"), "DEBUG"):
    ...     waiter.wait(snapshot)
    """

    def __init__(self, logger: logging.Logger, level: Level) -> None:
        self.logger = logger
        self.level = _parse_level(level)
        self._saved: Optional[int] = None

    def __enter__(self) -> logging.Logger:
        self._saved = self.logger.level
        self.logger.setLevel(self.level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._saved is not None:
            self.logger.setLevel(self._saved)
