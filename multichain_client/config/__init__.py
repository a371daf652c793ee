"""Configuration module for multichain_client."""

from multichain_client.config.loader import get_config_path, load_config, save_config
from multichain_client.config.schema import ClientConfig

__all__ = ["ClientConfig", "load_config", "save_config", "get_config_path"]
