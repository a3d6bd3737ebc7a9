"""Configuration package.

Provides the ConfigStore loader plus its parser, value coercion and cache layers.
"""
from .cache import CacheRecord, CacheStorage, FileCacheStorage, MemoryCacheStorage  # noqa: F401
from .config_store import ConfigStore, load_config  # noqa: F401
from .errors import ConfigError, ConfigParseError, ConfigSourceNotFound  # noqa: F401
from .settings import LoaderSettings  # noqa: F401
from .values import coerce_value  # noqa: F401
from .xml_parser import GLIZY_NAMESPACE, XmlConfigParser  # noqa: F401
