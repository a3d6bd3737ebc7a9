"""
confstore - Hierarchical XML Configuration Store
================================================

Loads namespaced XML configuration files into a flat, cached key-value store.

Modules:
- config: ConfigStore loader, XML parser, value coercion and cache storage
- utils: Logging utilities
- cli: Command-line inspection tool
"""

__version__ = "1.0.0"

from .config import (
    ConfigError,
    ConfigParseError,
    ConfigSourceNotFound,
    ConfigStore,
    FileCacheStorage,
    LoaderSettings,
    MemoryCacheStorage,
    coerce_value,
    load_config,
)
from .utils.logger import setup_logging

__all__ = [
    "ConfigStore",
    "load_config",
    "LoaderSettings",
    "FileCacheStorage",
    "MemoryCacheStorage",
    "coerce_value",
    "ConfigError",
    "ConfigParseError",
    "ConfigSourceNotFound",
    "setup_logging",
]
