"""
Configuration loader for the Smartcar client.
Reads credentials from the process environment, optionally seeded from a .env file.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..errors import ConfigNotFound

TEST_MODE_PREFIX = "E2E_"


class ConfigLoader:
    """Resolves configuration values from environment variables."""

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            env_file: Optional path to a .env file. Values already present in
                the environment are never overridden.
        """
        self.env_file = env_file
        self._load_environment_config()

    def _load_environment_config(self):
        """Load the .env file if one was given and exists."""
        if not self.env_file:
            return
        env_path = Path(self.env_file)
        if env_path.exists():
            load_dotenv(env_path, override=False)
            logging.getLogger(__name__).debug("Loaded env config from %s", env_path)
        else:
            logging.getLogger(__name__).warning("Environment config file not found: %s", env_path)

    @staticmethod
    def is_test_mode() -> bool:
        return os.getenv("MODE") == "test"

    def get(self, config_name: str) -> str:
        """
        Get a required environment variable.

        In test mode (``MODE=test``) the name is looked up with the ``E2E_``
        prefix.

        Raises:
            ConfigNotFound: if the variable is not set.
        """
        if self.is_test_mode():
            config_name = f"{TEST_MODE_PREFIX}{config_name}"
        value = os.getenv(config_name)
        if value is None:
            raise ConfigNotFound(f"Environment variable {config_name} not found !")
        return value

    def get_optional(self, config_name: str, default: Optional[str] = None) -> Optional[str]:
        try:
            return self.get(config_name)
        except ConfigNotFound:
            return default


def get_config(config_name: str) -> str:
    """Convenience wrapper around ``ConfigLoader().get``."""
    return ConfigLoader().get(config_name)


def setup_logging(log_level: str = "INFO", debug: bool = False):
    """Setup logging for the ``smartcar`` logger hierarchy."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s" if debug else "%(levelname)s - %(message)s"

    logger = logging.getLogger("smartcar")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(format_str))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else level)
    return logger
