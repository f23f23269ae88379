"""Neatest - converter between internal and external spell-checker test fixtures."""

import sys
from collections.abc import Callable

from loguru import logger

__version__ = "0.1.0"

DEFAULT_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"


def configure_logging(
    log_file: str | None = None,
    level: str = "INFO",
    sink: Callable[[str], object] | None = None,
    console_format: str = DEFAULT_FORMAT,
) -> None:
    """Configure loguru logger with specified level and optional log file.

    Args:
        log_file: Optional path to log file. If None, logs only to the console sink.
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to INFO.
        sink: Console sink. Defaults to stderr.
        console_format: Format of console records.

    Example:
        >>> configure_logging(level="DEBUG")
        >>> configure_logging(log_file="neatest.log", level="WARNING")
    """
    logger.remove()

    logger.add(
        sink if sink is not None else sys.stderr,
        format=console_format,
        level=level,
        colorize=sink is None,
    )

    # Log files always get the full record, whatever the console shows
    if log_file:
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            level=level,
            rotation="10 MB",
            retention="1 week",
        )


def install_exception_hook() -> None:
    """Install an exception hook that logs uncaught exceptions with traceback."""

    def exception_handler(exc_type, exc_value, exc_traceback):
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return

        logger.opt(exception=(exc_type, exc_value, exc_traceback)).critical("Uncaught exception")

    sys.excepthook = exception_handler


__all__ = ["__version__", "configure_logging", "install_exception_hook"]
