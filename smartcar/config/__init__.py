"""
Configuration management for the Smartcar client.
"""

from .api_config import ApiConfig, get_api_version, set_api_version
from .config_loader import ConfigLoader, get_config, setup_logging

__all__ = ["ApiConfig", "ConfigLoader", "get_api_version", "get_config", "set_api_version", "setup_logging"]
