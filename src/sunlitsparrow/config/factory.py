# region Docstring
"""
sunlitsparrow.config.factory

Loading of the sunlitsparrow settings classes from the config directory.

Overview:
- All settings live in one config directory (APP_ROOT: `SUNLITSPARROW_CONFIG_DIR`,
    else the working directory). It may hold a `.env` file with
    `SUNLITSPARROW_*` assignments, a shared `config.yaml` and a
    `config.{ENVIRONMENT}.yaml` overlay.
- YAML keys are the settings field names (`items_limit`, `db_path`, ...), so
    one YAML file can configure the store, logging and CLI classes at once.
    Keys a class does not declare are ignored.
- `.env` and process variables use the `SUNLITSPARROW_*` aliases.

Contents:
- FactoryBaseSettings:
    Base for StoreSettings, LoggingSettings and CliSettings. Values are taken
    from the first source that has them:
        1. Process environment (`SUNLITSPARROW_*`)
        2. `<config dir>/.env`
        3. `<config dir>/config.{ENVIRONMENT}.yaml`
        4. `<config dir>/config.yaml`
        5. Keyword arguments
        6. Field defaults
- config_files() -> list[Path]
- get_settings(settings_cls) -> settings_cls instance, one per class per process

Design notes:
- The config directory is looked up each time a class is instantiated, not at
    import, so `.env` and YAML always come from the same directory.
- Missing files are skipped silently; zero-configuration use needs none of them.
- `get_settings` memoizes; the test suite clears it between tests.
"""
# endregion
# region Imports
from functools import lru_cache
from pathlib import Path
from typing import Type, TypeVar

from pydantic_settings import (
    BaseSettings,
    DotEnvSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from . import base

# endregion
# region Config directory
APP_ROOT: Path = base.APP_ROOT
APP_ENV: str = base.APP_ENV


def config_files() -> list[Path]:
    """YAML files read for settings; later entries override earlier ones."""
    return [APP_ROOT / "config.yaml", APP_ROOT / f"config.{APP_ENV}.yaml"]


# endregion
# region FactoryBaseSettings Class
T = TypeVar("T", bound=BaseSettings)


class FactoryBaseSettings(BaseSettings):
    """
    Settings read from SUNLITSPARROW_* variables, `.env` and the config YAML files.
    """

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        dotenv_file = DotEnvSettingsSource(
            settings_cls, env_file=APP_ROOT / ".env", env_file_encoding="utf-8"
        )
        yaml_files = YamlConfigSettingsSource(settings_cls, yaml_file=config_files())
        return env_settings, dotenv_file, yaml_files, init_settings


# endregion
# region get_settings Factory Function


@lru_cache
def get_settings(settings_cls: Type[T]) -> T:
    """
    Return the shared instance of `settings_cls`.

    The config directory is read on the first call for each class only.
    """
    return settings_cls()


# endregion
