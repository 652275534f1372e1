"""
sunlitsparrow.config
Configuration and settings management for the sunlitsparrow CLI.
Overview:
- Provides Pydantic settings classes for locating the Maccy store, logging,
    and CLI defaults.
- Each settings class inherits from FactoryBaseSettings and supports
    environment variable overrides via Field aliases, .env files, and
    config.yaml / config.{env}.yaml in APP_ROOT.
Contents:
- StoreSettings:
    Explicit store path, the home directory Maccy paths are resolved against,
    and the working-directory fallback filename. `candidate_paths` lists every
    location checked, in order.
- LoggingSettings:
    Default verbosity and an optional JSON-lines log file.
- CliSettings:
    Default item limit for `items` and default output file for `export`.
- get_settings:
    Cached factory (re-exported from .factory).
Design Notes:
- Default values allow zero-configuration use on a Mac running Maccy.
- Path fields accept strings and expand `~`.
"""

from pathlib import Path
from typing import Any, Optional

from pydantic import Field, field_validator

from .base import APP_ENV, APP_ROOT  # noqa: F401
from .factory import FactoryBaseSettings
from .factory import get_settings  # noqa: F401  This is used externally

MACCY_BUNDLE_ID = "org.p0deje.Maccy"
MACCY_TEAM_ID = "43Q936XBMJ"
STORE_FILENAME = "Storage.sqlite"


def _expand_path(v: Any) -> Any:
    if isinstance(v, str):
        v = Path(v) if v else None
    if isinstance(v, Path):
        return v.expanduser()
    return v


class StoreSettings(FactoryBaseSettings):
    """
    Where to look for the Maccy store.
    """

    db_path: Optional[Path] = Field(
        default=None,
        alias="SUNLITSPARROW_DB_PATH",
        description="Explicit path to a Maccy Storage.sqlite file.",
    )
    home: Path = Field(
        default_factory=Path.home,
        alias="SUNLITSPARROW_HOME",
        description="Home directory the standard Maccy locations are resolved against.",
    )
    fallback_filename: str = Field(
        default="Maccy-Storage.sqlite",
        alias="SUNLITSPARROW_FALLBACK_DB",
        description="File in the working directory used when no Maccy store is found.",
    )

    @field_validator("db_path", "home", mode="before")
    def validate_paths(cls, v: Any) -> Any:
        return _expand_path(v)

    @property
    def candidate_paths(self) -> list[Path]:
        """Locations checked for the store, in priority order."""
        support = Path("Library") / "Application Support" / "Maccy" / STORE_FILENAME
        return [
            self.home / support,
            self.home / "Library" / "Containers" / MACCY_BUNDLE_ID / "Data" / support,
            self.home
            / "Library"
            / "Group Containers"
            / f"{MACCY_TEAM_ID}.{MACCY_BUNDLE_ID}"
            / support,
            Path(self.fallback_filename),
        ]


class LoggingSettings(FactoryBaseSettings):
    """
    Logging configuration settings.
    """

    verbosity: int = Field(
        default=0,
        ge=0,
        alias="SUNLITSPARROW_VERBOSITY",
        description="Default verbosity when no -v flag is given (0-3).",
    )
    log_file: Optional[Path] = Field(
        default=None,
        alias="SUNLITSPARROW_LOG_FILE",
        description="Optional JSON-lines log file.",
    )

    @field_validator("log_file", mode="before")
    def validate_log_file(cls, v: Any) -> Any:
        return _expand_path(v)


class CliSettings(FactoryBaseSettings):
    """
    CLI configuration settings.
    """

    items_limit: int = Field(
        default=10,
        ge=0,
        alias="SUNLITSPARROW_ITEMS_LIMIT",
        description="Default number of items shown by `items` (0 for all).",
    )
    export_file: Path = Field(
        default=Path("maccy-export.json"),
        alias="SUNLITSPARROW_EXPORT_FILE",
        description="Default output file for `export`.",
    )


__all__ = [
    "APP_ENV",
    "APP_ROOT",
    "CliSettings",
    "FactoryBaseSettings",
    "LoggingSettings",
    "StoreSettings",
    "get_settings",
]
