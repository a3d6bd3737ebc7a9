"""
Configuration Errors
====================

Exception types raised while building a ConfigStore.
"""

from pathlib import Path
from typing import Optional, Union


class ConfigError(Exception):
    """Base class for configuration loading failures."""


class ConfigSourceNotFound(ConfigError, FileNotFoundError):
    """A required configuration source does not exist."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"Configuration source not found: {self.path}")


class ConfigParseError(ConfigError):
    """A configuration source is malformed or cannot be resolved."""

    def __init__(self, path: Union[str, Path], reason: str, line: Optional[int] = None):
        self.path = Path(path)
        self.reason = reason
        self.line = line
        location = f"{self.path}:{line}" if line else str(self.path)
        super().__init__(f"Invalid configuration in {location}: {reason}")
