"""Loguru setup for the CLI.

Diagnostics go to stderr so they never mix with command output on stdout.
An optional log file keeps a longer history of editor launches and store
writes, which is useful when a project "does nothing" on open.  Records from
stdlib ``logging`` users are routed into loguru as well.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from loguru import logger

_STDERR_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"
_FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message}"


class _InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru, keeping the original call-site."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "WARNING", log_file: str | Path | None = None) -> None:
    """Replace loguru's default sink with ours.

    ``level`` applies to stderr.  The file sink, when given, always records
    DEBUG and above and rotates at 1 MB, keeping three old files.
    """
    level = level.upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format=_STDERR_FORMAT)
    if log_file:
        logger.add(
            Path(log_file).expanduser(),
            level="DEBUG",
            format=_FILE_FORMAT,
            rotation="1 MB",
            retention=3,
            encoding="utf-8",
        )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    logger.debug("Logging to stderr at {}{}", level, f" and to {log_file}" if log_file else "")
