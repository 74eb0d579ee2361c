"""Loguru setup for probe runs.

The console gets short, human-oriented lines; the optional log file
keeps full records so a failed run can be inspected afterwards.

Environment Variables:
- PROVIDER_PROBE_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
- PROVIDER_PROBE_LOG_DIR: Log directory path. Default: logs/
"""

import logging
import os
import sys
from pathlib import Path

from loguru import logger

LOG_LEVEL = os.environ.get("PROVIDER_PROBE_LOG_LEVEL", "INFO").upper()
LOG_DIR = Path(os.environ.get("PROVIDER_PROBE_LOG_DIR", "logs"))

CONSOLE_FORMAT = "<dim>{time:HH:mm:ss}</dim> <level>{level: <7}</level> {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} | {message}"

# Libraries whose records are forwarded into loguru. Both log request URLs,
# and Gemini URLs carry the API key.
QUIET_LOGGERS = ("httpx", "httpcore")

_logging_configured = False


def setup_logging(level: str | None = None, log_file: bool = True) -> None:
    """Replace loguru's default sink with the probe's console and file sinks.

    Args:
        level: Override for PROVIDER_PROBE_LOG_LEVEL
        log_file: Set to False to log to the console only
    """
    global _logging_configured
    if _logging_configured:
        return
    _logging_configured = True

    level = (level or LOG_LEVEL).upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        logger.add(
            LOG_DIR / "provider-probe.log",
            level=level,
            format=FILE_FORMAT,
            rotation="10 MB",
            retention="7 days",
        )


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru, tagged with their logger name."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(exception=record.exc_info).log(level, f"[{record.name}] {record.getMessage()}")


def intercept_standard_logging() -> None:
    """Route stdlib logging through loguru, keeping HTTP client loggers at WARNING."""
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
