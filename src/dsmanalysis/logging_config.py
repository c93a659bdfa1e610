"""
Logging Configuration
=====================
Attaches handlers to the 'dsmanalysis' package logger.

Modules only call `logging.getLogger(__name__)`; whoever embeds the engine
(an application entry point, the test session) decides where records go by
calling `setup_logging` once.
"""
import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "dsmanalysis"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%H:%M:%S"


def _handler(handler: logging.Handler, level: int, formatter: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Route the package's log records to stdout and, optionally, a file.

    Args:
        level: Logging level as a number or a name (e.g. logging.DEBUG, "DEBUG").
        log_file: Optional path of a log file; it is overwritten on every call.

    Returns:
        The configured package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    # Calling again replaces the handlers instead of doubling every record
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level, formatter))
    if log_file:
        logger.addHandler(_handler(logging.FileHandler(log_file, mode="w", encoding="utf-8"), level, formatter))

    logger.debug(f"Logging configured at level {logging.getLevelName(level)}.")
    return logger
