# region Docstring
"""
sunlitsparrow.logger

Logging setup for the sunlitsparrow CLI and library.

Overview:
- The library logs under the `sunlitsparrow` logger, which carries a
    NullHandler so nothing is printed unless the application opts in.
- `configure_logging` applies a dictConfig with a console handler on stderr
    and, optionally, a JSON-lines file handler.
- A TRACE level (5) sits below DEBUG for per-row/per-query detail.

Verbosity:
- 0: warnings and errors only
- 1: INFO
- 2: DEBUG
- 3+: TRACE
"""
# endregion
# region Imports
import logging
from logging import Logger as T_Logger
from logging.config import dictConfig
from pathlib import Path
from typing import Optional

# endregion
# region Constants
TRACE: int = 5
"""[int] Log level below DEBUG for per-query detail."""
LOGGER_NAME: str = "sunlitsparrow"

logging.addLevelName(TRACE, "TRACE")
logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


# endregion
# region Functions
def verbosity_to_level(verbosity: int) -> int:
    """
    Map a `-v` count to a logging level.

    Example:
        >>> verbosity_to_level(2) == logging.DEBUG
        True
    """
    if verbosity >= 3:
        return TRACE
    if verbosity == 2:
        return logging.DEBUG
    if verbosity == 1:
        return logging.INFO
    return logging.WARNING


def get_logger(name: Optional[str] = None) -> T_Logger:
    """Return the package logger, or one of its children."""
    root = logging.getLogger(LOGGER_NAME)
    return root.getChild(name) if name else root


def configure_logging(verbosity: int = 0, log_file: Optional[Path] = None) -> T_Logger:
    """
    Configure the package logger for command-line use.

    Args:
        verbosity (int): Number of `-v` flags given.
        log_file (Optional[Path]): When set, also write JSON lines to this file.

    Returns:
        Logger: The configured package logger.
    """
    level = logging.getLevelName(verbosity_to_level(verbosity))
    handlers = ["console"]
    config: dict = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(levelname)s: %(asctime)s %(message)s",
                "datefmt": "%H:%M:%S",
            },
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": level,
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            LOGGER_NAME: {
                "handlers": handlers,
                "level": level,
                "propagate": False,
            },
        },
    }
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        config["handlers"]["file"] = {
            "class": "logging.FileHandler",
            "filename": str(log_file),
            "formatter": "json",
            "level": level,
        }
        handlers.append("file")

    dictConfig(config)
    logger = get_logger()
    logger.log(TRACE, "Logging configured at %s", level)
    return logger


# endregion

__all__ = ["TRACE", "LOGGER_NAME", "verbosity_to_level", "get_logger", "configure_logging"]
