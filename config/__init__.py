"""
Configuration module for vectordex.

This module provides configuration management including
loading settings from YAML files and environment variables.

Example:
    >>> from config import load_config
    >>>
    >>> settings = load_config()
    >>> print(settings.index_type)
    >>> print(settings.hnsw_config.ef_search)
"""

from .settings import (
    Settings,
    HNSWConfig,
    StorageConfig,
    load_config,
    get_default_config_path,
)

__all__ = [
    "Settings",
    "HNSWConfig",
    "StorageConfig",
    "load_config",
    "get_default_config_path",
]
