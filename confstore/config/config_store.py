#!/usr/bin/env python3
"""Hierarchical XML configuration store.

Loads a root XML configuration file, resolving nested ``Group`` elements and
``Import``-ed files into one flat namespace of slash-delimited keys
(``group/innergroup/value1``), with scalar values coerced to int, float or
bool where they look like one.

The flattened map is cached alongside a verbatim copy of the root file.
On the next construction the cache is reused only if the root file is still
byte-identical to that copy. Imported files are not fingerprinted: editing
an imported file alone does not invalidate the cache, and neither does
changing the skip-if-missing policy or namespace between runs.
"""
from __future__ import annotations
import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .cache import CacheStorage, ConfigCache, FileCacheStorage
from .errors import ConfigParseError
from .settings import LoaderSettings
from .values import ConfigMap, ConfigValue, build_config_map
from .xml_parser import XmlConfigParser

logger = logging.getLogger(__name__)


class ConfigStore:
    """Read-only view over a flattened, cached XML configuration."""

    def __init__(
        self,
        config_file: str | os.PathLike[str],
        cache: Optional[CacheStorage] = None,
        settings: Optional[LoaderSettings] = None,
        skip_if_missing: Optional[bool] = None,
    ):
        """
        Load the configuration, from cache when the root file is unchanged.

        Args:
            config_file: Path to the root XML configuration file
            cache: Storage for the compiled cache (defaults to files in settings.cache_dir)
            settings: Loader settings (defaults to LoaderSettings.from_env())
            skip_if_missing: Override settings.skip_if_missing

        Raises:
            ConfigSourceNotFound: A source is missing and skipping is disabled
            ConfigParseError: A source is malformed
        """
        self.settings = settings if settings is not None else LoaderSettings.from_env()
        self.skip_if_missing = (
            self.settings.skip_if_missing if skip_if_missing is None else skip_if_missing
        )
        self.config_file = Path(config_file)
        self.cache_hit = False

        storage = cache if cache is not None else FileCacheStorage(self.settings.cache_dir)
        self._cache = ConfigCache(storage)
        self._parser = XmlConfigParser(
            namespace=self.settings.namespace,
            skip_if_missing=self.skip_if_missing,
        )
        self._config: ConfigMap = {}
        self._load()

    # ------------------------------------------------------------------
    def _read_source(self) -> Optional[bytes]:
        if not self.config_file.exists():
            return None
        try:
            return self.config_file.read_bytes()
        except OSError as e:
            raise ConfigParseError(self.config_file, f"cannot read source: {e}") from e

    # ------------------------------------------------------------------
    def _load(self) -> None:
        source = self._read_source()

        if source is not None:
            cached = self._cache.lookup(source)
            if cached is not None:
                self._config = cached
                self.cache_hit = True
                logger.info(f"Configuration cache hit for {self.config_file} ({len(cached)} keys)")
                return

        logger.info(f"Configuration cache miss for {self.config_file}, parsing")

        if source is None:
            # Missing root: the parser applies the skip-if-missing policy
            entries = self._parser.parse(self.config_file)
        else:
            entries = self._parser.parse_bytes(source, self.config_file)

        self._config = build_config_map(entries)

        if source is not None:
            self._cache.save(self._config, source)

        logger.info(f"Loaded {len(self._config)} configuration keys from {self.config_file}")

    # ------------------------------------------------------------------
    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default`` if absent."""
        if key not in self._config:
            return default
        return _copy_value(self._config[key])

    def get_all(self) -> Mapping[str, ConfigValue]:
        """Return a read-only copy of the whole flattened configuration."""
        return MappingProxyType({key: _copy_value(value) for key, value in self._config.items()})

    def __contains__(self, key: object) -> bool:
        return key in self._config

    def __len__(self) -> int:
        return len(self._config)

    def __repr__(self) -> str:
        return f"ConfigStore({str(self.config_file)!r}, keys={len(self._config)}, cache_hit={self.cache_hit})"


def _copy_value(value: ConfigValue) -> ConfigValue:
    return list(value) if isinstance(value, list) else value


def load_config(config_file: str | os.PathLike[str], **kwargs: Any) -> ConfigStore:
    """
    Convenience function to build a ConfigStore.

    Example:
        >>> config = load_config("xml/myConfig.xml", skip_if_missing=False)
        >>> config.get("thumbnail/width")
        400
    """
    return ConfigStore(config_file, **kwargs)


__all__ = ["ConfigStore", "load_config"]
