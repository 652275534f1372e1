# region Docstring
"""
sunlitsparrow.config.base

Environment detection for configuration loading.

Overview:
- Resolves the directory configuration files are read from and the current
    environment name, which selects the environment-specific YAML file.

Contents:
- Classes:
    - AppEnv: Environment and root-directory detection.
- Module-level Constants:
    - APP_ROOT (Path): Directory holding `.env` and `config*.yaml`.
    - APP_ENV (str): Environment name (`ENVIRONMENT`, default "dev").

Environment Detection Logic:
- `SUNLITSPARROW_CONFIG_DIR` overrides the root; otherwise the current working
    directory is used.
- `ENVIRONMENT` selects the environment; unrecognised values fall back to "dev".
"""
# endregion
# region Imports
import os
from pathlib import Path
from typing import Literal

# endregion
# region AppEnv Class


class AppEnv:
    """
    Application environment detection utility.

    Attributes:
        PROD (Literal["prod"]): Production environment name.
        DEV (Literal["dev"]): Development environment name.
        TEST (Literal["test"]): Test environment name.
    """

    PROD: Literal["prod"] = "prod"
    DEV: Literal["dev"] = "dev"
    TEST: Literal["test"] = "test"

    @classmethod
    def environment(cls) -> Literal["prod", "dev", "test"]:
        """Determine the current application environment."""
        env = os.getenv("ENVIRONMENT")
        if env in {cls.PROD, cls.DEV, cls.TEST}:
            return env
        return cls.DEV

    @classmethod
    def app_root(cls) -> Path:
        """Get the directory configuration files are read from."""
        override = os.getenv("SUNLITSPARROW_CONFIG_DIR")
        if override:
            return Path(override).expanduser().resolve()
        return Path.cwd().resolve()


# endregion
# region Module-level Constants
APP_ROOT: Path = AppEnv.app_root()
"""[Path] Directory holding `.env` and `config*.yaml`."""
APP_ENV: Literal["prod", "dev", "test"] = AppEnv.environment()
"""[Literal] Environment name."""
# endregion


__all__ = ["APP_ENV", "APP_ROOT", "AppEnv"]
