# region Docstring
"""
sunlitsparrow.db

Locating and opening the Maccy store.

Overview:
- `find_maccy_db` checks an explicit path first, then each standard Maccy
    location, then a fallback file in the working directory.
- `open_maccy_db` opens the store read-only through sqlite-utils and pings it
    before handing it to callers.
"""
# endregion
# region Imports
import sqlite3
from logging import Logger as T_Logger
from pathlib import Path
from typing import Optional

from sqlite_utils import Database

from sunlitsparrow.config import StoreSettings, get_settings
from sunlitsparrow.history.errors import StoreConnectionError
from sunlitsparrow.logger import get_logger

# endregion
# region Exceptions


class DatabaseNotFoundError(Exception):
    """Raised when no Maccy store exists at any expected location."""

    pass


# endregion
# region Functions


def find_maccy_db(
    settings: Optional[StoreSettings] = None, logger: Optional[T_Logger] = None
) -> Path:
    """
    Return the path of the Maccy store.

    Args:
        settings (Optional[StoreSettings]): Locations to check; loaded when omitted.
        logger (Optional[Logger]): Receives diagnostics.

    Returns:
        Path: The first existing store.

    Raises:
        DatabaseNotFoundError: If an explicit path does not exist, or no
            candidate location holds a store.
    """
    settings = settings or get_settings(StoreSettings)
    logger = logger or get_logger("db")

    if settings.db_path is not None:
        if settings.db_path.is_file():
            logger.info("Using Maccy database at: %s", settings.db_path)
            return settings.db_path
        raise DatabaseNotFoundError(f"Maccy database not found at {settings.db_path}")

    for path in settings.candidate_paths:
        logger.debug("Checking database path: %s", path)
        if path.is_file():
            logger.info("Found Maccy database at: %s", path)
            return path

    logger.info("No Maccy database found in any expected location")
    raise DatabaseNotFoundError(
        "Maccy database not found in any expected location. You can place a "
        f"database file named '{settings.fallback_filename}' in the current "
        "directory for testing"
    )


def open_maccy_db(
    settings: Optional[StoreSettings] = None,
    path: Optional[Path] = None,
    logger: Optional[T_Logger] = None,
) -> Database:
    """
    Open the Maccy store read-only.

    Args:
        settings (Optional[StoreSettings]): Used to locate the store when
            `path` is not given.
        path (Optional[Path]): Store to open, bypassing discovery.
        logger (Optional[Logger]): Receives diagnostics.

    Returns:
        Database: The open, pinged store.

    Raises:
        DatabaseNotFoundError: If the store cannot be located.
        StoreConnectionError: If the file cannot be opened or is not a database.
    """
    logger = logger or get_logger("db")
    path = path if path is not None else find_maccy_db(settings, logger)

    try:
        conn = sqlite3.connect(f"{path.resolve().as_uri()}?mode=ro", uri=True)
    except sqlite3.Error as e:
        raise StoreConnectionError(f"error opening SQLite database: {e}") from e

    try:
        conn.execute("SELECT 1 FROM sqlite_master LIMIT 1").close()
    except sqlite3.Error as e:
        conn.close()
        raise StoreConnectionError(f"error connecting to database: {e}") from e

    logger.info("Successfully connected to Maccy database")
    return Database(conn)


# endregion

__all__ = ["DatabaseNotFoundError", "find_maccy_db", "open_maccy_db"]
