"""Configuration module for bashgate."""

from bashgate.config.loader import load_config, save_config, get_config_path
from bashgate.config.schema import Config

__all__ = ["Config", "load_config", "save_config", "get_config_path"]
