"""
Logger module for mongo_people.

Package code logs through get_logger() so that a logger installed with set_logger()
is picked up everywhere, including modules imported before the swap.
"""

import logging
import sys

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Module-level logger
logger: logging.Logger = logging.getLogger('mongo_people')
logger.setLevel(logging.WARNING)  # Default to WARNING level to avoid spam

def get_logger() -> logging.Logger:
    """The logger package code should write to. Look it up per call; don't cache it."""
    return logger

def set_logger(custom_logger: logging.Logger) -> None:
    """Allow users to provide their own logger."""
    global logger
    logger = custom_logger

def set_log_level(level: int | str) -> None:
    """Set the logging level for the module. 
    
    Args:
        level: logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, or logging.CRITICAL (or their names)
    """
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)

def configure_console_logging(level: int | str = logging.INFO) -> None:
    """ Attach a stdout handler to the package logger. Safe to call more than once. """
    if not any(getattr(handler, "_mongo_people_console", False) for handler in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
        handler._mongo_people_console = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    set_log_level(level)
