"""
Logging utilities for Flowboard.

Every module logs through the loguru ``logger`` exported here. Records emitted
through the standard library (uvicorn, fastapi, httpx) are routed into loguru
by ``InterceptHandler`` so the CLI, the API server and the refresh loop share
one sink configuration.
"""

import inspect
import logging
import sys
from pathlib import Path

from loguru import logger as _logger

from ..settings import Settings, settings

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi", "httpx")


class InterceptHandler(logging.Handler):
    """Redirect standard library log records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        level: str | int
        try:
            level = _logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk back to the frame that issued the logging call
        frame, depth = inspect.currentframe(), 0
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        _logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(
    level: str = "INFO",
    format: str | None = None,
    log_file: str | Path | None = None,
    rotation: str = "20 MB",
    retention: str = "1 week",
    serialize: bool = False,
) -> None:
    """
    Configure loguru sinks.

    Args:
        level: Minimum log level to capture
        format: Log message format string, ``DEFAULT_FORMAT`` when omitted
        log_file: Optional file sink, rotated and compressed by loguru
        rotation: When to rotate the log file (size or time)
        retention: How long to keep rotated files
        serialize: Whether to write the file sink as JSON lines
    """
    format = format or DEFAULT_FORMAT

    _logger.remove()
    _logger.add(sys.stderr, level=level, format=format, colorize=True, backtrace=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _logger.add(
            str(log_path),
            level=level,
            format=format,
            rotation=rotation,
            retention=retention,
            compression="zip",
            serialize=serialize,
            backtrace=True,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for log_name in INTERCEPTED_LOGGERS:
        logging.getLogger(log_name).handlers = [InterceptHandler()]


def configure_from_settings(config: Settings, level: str | None = None) -> None:
    """Apply the logging section of ``config``, optionally overriding the level."""
    setup_logging(
        level=level or config.log_level,
        format=config.log_format,
        log_file=config.get_log_dir() / "flowboard.log" if config.log_to_file else None,
        rotation=config.log_rotation,
        retention=config.log_retention,
    )


configure_from_settings(settings)

logger = _logger
