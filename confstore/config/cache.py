"""
Configuration Cache
===================

Persists the flattened configuration map together with a verbatim snapshot
of the root source it was built from. The snapshot is the fingerprint: the
cached map is only reused while the root file is byte-identical to it.

Storage is injected through ``CacheStorage`` (named byte blobs), so the
same logic runs against a directory on disk or an in-memory dict.
"""

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from .values import ConfigMap

logger = logging.getLogger(__name__)

MAP_ARTIFACT = "configCache.yaml"
SNAPSHOT_ARTIFACT = "mainCache.xml"
CACHE_FORMAT_VERSION = 1


class CacheStorage(ABC):
    """A store of named binary blobs."""

    @abstractmethod
    def read(self, name: str) -> Optional[bytes]:
        """Return the blob stored under ``name``, or None if absent."""

    @abstractmethod
    def write(self, name: str, data: bytes) -> None:
        """Store ``data`` under ``name``, replacing any previous blob."""

    @abstractmethod
    def delete(self, name: str) -> None:
        """Remove the blob stored under ``name`` if present."""


class MemoryCacheStorage(CacheStorage):
    """In-process cache storage, mostly for tests and one-off loads."""

    def __init__(self):
        self.blobs: Dict[str, bytes] = {}

    def read(self, name: str) -> Optional[bytes]:
        return self.blobs.get(name)

    def write(self, name: str, data: bytes) -> None:
        self.blobs[name] = bytes(data)

    def delete(self, name: str) -> None:
        self.blobs.pop(name, None)


class FileCacheStorage(CacheStorage):
    """Cache storage backed by files in a single directory."""

    def __init__(self, cache_dir: Union[str, os.PathLike]):
        self.cache_dir = Path(cache_dir)

    def path_for(self, name: str) -> Path:
        return self.cache_dir / name

    def read(self, name: str) -> Optional[bytes]:
        path = self.path_for(name)
        if not path.is_file():
            return None
        return path.read_bytes()

    def write(self, name: str, data: bytes) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        target = self.path_for(name)

        # Write to a sibling temp file and swap it in so readers never see a partial blob
        fd, tmp_name = tempfile.mkstemp(prefix=f".{name}.", dir=str(self.cache_dir))
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def delete(self, name: str) -> None:
        path = self.path_for(name)
        if path.exists():
            path.unlink()


@dataclass
class CacheRecord:
    """A serialized configuration map and the root snapshot it belongs to."""

    payload: bytes
    snapshot: bytes

    @classmethod
    def from_config(cls, config: ConfigMap, snapshot: bytes) -> "CacheRecord":
        return cls(payload=serialize_config(config), snapshot=snapshot)

    def matches(self, source: bytes) -> bool:
        return self.snapshot == source

    def to_config(self) -> ConfigMap:
        return deserialize_config(self.payload)


class CacheFormatError(ValueError):
    """The serialized map could not be turned back into a configuration map."""


def serialize_config(config: ConfigMap) -> bytes:
    """Serialize a flat configuration map to YAML bytes (stable key order)."""
    document = {
        "version": CACHE_FORMAT_VERSION,
        "params": dict(config),
    }
    # Non-ASCII is escaped; raw NEL or LINE SEPARATOR would be folded as line breaks on load
    text = yaml.safe_dump(document, sort_keys=True, allow_unicode=False, default_flow_style=False)
    return text.encode("utf-8")


def deserialize_config(payload: bytes) -> ConfigMap:
    """
    Restore a configuration map written by ``serialize_config``.

    Raises:
        CacheFormatError: If the payload is not a well-formed cached map
    """
    try:
        document = yaml.safe_load(payload.decode("utf-8"))
    except (yaml.YAMLError, UnicodeDecodeError) as e:
        raise CacheFormatError(f"unreadable cache payload: {e}") from e

    if not isinstance(document, dict) or document.get("version") != CACHE_FORMAT_VERSION:
        raise CacheFormatError("unsupported cache payload format")

    params = document.get("params")
    if not isinstance(params, dict):
        raise CacheFormatError("cache payload has no params mapping")

    for key, value in params.items():
        if not isinstance(key, str):
            raise CacheFormatError(f"invalid key in cache payload: {key!r}")
        values = value if isinstance(value, list) else [value]
        for item in values:
            if not isinstance(item, (bool, int, float, str)):
                raise CacheFormatError(f"invalid value for '{key}' in cache payload")

    return params


class ConfigCache:
    """Reads and writes the map/snapshot pair through a ``CacheStorage``."""

    def __init__(self, storage: CacheStorage):
        self.storage = storage

    def load(self) -> Optional[CacheRecord]:
        """Return the stored record, or None if either artifact is missing."""
        snapshot = self.storage.read(SNAPSHOT_ARTIFACT)
        if snapshot is None:
            return None
        payload = self.storage.read(MAP_ARTIFACT)
        if payload is None:
            return None
        return CacheRecord(payload=payload, snapshot=snapshot)

    def lookup(self, source: bytes) -> Optional[ConfigMap]:
        """
        Return the cached map if its snapshot equals ``source``.

        A corrupt payload is treated as a miss.
        """
        record = self.load()
        if record is None or not record.matches(source):
            return None
        try:
            return record.to_config()
        except CacheFormatError as e:
            logger.warning(f"Ignoring unusable configuration cache: {e}")
            return None

    def save(self, config: ConfigMap, source: bytes) -> CacheRecord:
        """
        Persist ``config`` with ``source`` as its snapshot.

        The old snapshot is removed first and the new one written last, so
        an interrupted save never pairs a snapshot with a different map.
        """
        record = CacheRecord.from_config(config, source)
        self.storage.delete(SNAPSHOT_ARTIFACT)
        self.storage.write(MAP_ARTIFACT, record.payload)
        self.storage.write(SNAPSHOT_ARTIFACT, record.snapshot)
        logger.debug(f"Configuration cache written ({len(config)} keys)")
        return record
