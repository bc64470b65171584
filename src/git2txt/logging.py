from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from pathlib import Path

LOGGER_NAME = "git2txt"

_LOGGING_CONFIGURED = False


def setup_logging(
    filename: str | Path | None = None,
    *,
    debug: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Set up structured logging for the git2txt package.

    structlog is configured once; later calls only adjust the package
    logger level and attach an optional file handler.

    Args:
        filename: Optional path to a log file. If None, logs are written to stderr.
        debug: Lower the package logger to DEBUG when True.

    Returns:
        A structlog logger instance configured for the git2txt package.
    """
    global _LOGGING_CONFIGURED  # noqa: PLW0603
    if not _LOGGING_CONFIGURED:
        logging.basicConfig(
            level=logging.INFO,
            handlers=[logging.StreamHandler(sys.stderr)],
            format="%(message)s",
        )
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_CONFIGURED = True

    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    if filename:
        handler = logging.FileHandler(str(filename), encoding="utf-8")
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)

    return structlog.get_logger(LOGGER_NAME)


logger = setup_logging()
