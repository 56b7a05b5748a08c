"""Configuration loader for the backend test harness

Values are resolved with the following priority:
1. Environment variables (highest priority)
2. .env file
3. Hardcoded defaults (lowest priority)
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")


class ConfigLoader:
    """Reads typed settings from the environment and an optional .env file"""

    def __init__(self, env_path: Optional[str] = None):
        """
        Args:
            env_path: Path to a .env file. Defaults to '.env' in the current directory.
        """
        self.env_path = Path(env_path) if env_path else Path(".env")
        self._load_env_file()

    def _load_env_file(self):
        if self.env_path.exists():
            # Variables already in the environment keep priority over the file
            load_dotenv(dotenv_path=self.env_path, override=False)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f".env file not found at {self.env_path}, using environment variables and defaults only")

    def get(self, env_var: str, default: Any) -> Any:
        """Get a value, coerced to the type of ``default``

        Args:
            env_var: Environment variable name to check
            default: Value used when the variable is unset or unparsable

        Returns:
            The environment value converted to ``type(default)``, or the default
        """
        env_value = os.getenv(env_var)
        if env_value is None:
            if isinstance(default, str) and default.startswith("~/"):
                return str(Path(default).expanduser())
            return default

        if isinstance(default, bool):
            return env_value.strip().lower() in _TRUE_VALUES
        if isinstance(default, (int, float)):
            try:
                return type(default)(env_value)
            except ValueError:
                logger.warning(
                    f"Failed to parse {env_var}={env_value} as {type(default).__name__}, using default: {default}"
                )
                return default
        return env_value

    def get_optional(self, env_var: str) -> Optional[str]:
        """Get a value that has no default; empty strings count as unset"""
        return os.getenv(env_var) or None


_config_loader = None


def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
