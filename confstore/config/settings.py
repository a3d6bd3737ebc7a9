#!/usr/bin/env python3
"""
Runtime settings for the configuration loader
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .xml_parser import GLIZY_NAMESPACE

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass
class LoaderSettings:
    """Settings controlling how a ConfigStore loads and caches its sources"""

    # Missing sources contribute nothing instead of failing
    skip_if_missing: bool = True

    # Cache settings
    cache_dir: str = "cache"

    # Parsing settings
    namespace: str = GLIZY_NAMESPACE

    # Logging settings
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'LoaderSettings':
        """Create settings from environment variables (and a .env file if present)"""
        load_dotenv(dotenv_path)

        return cls(
            skip_if_missing=_env_bool('CONFSTORE_SKIP_IF_MISSING', True),
            cache_dir=os.getenv('CONFSTORE_CACHE_DIR', 'cache'),
            namespace=os.getenv('CONFSTORE_NAMESPACE', GLIZY_NAMESPACE),
            log_level=os.getenv('CONFSTORE_LOG_LEVEL', 'INFO').upper(),
            log_file=os.getenv('CONFSTORE_LOG_FILE') or None,
        )
