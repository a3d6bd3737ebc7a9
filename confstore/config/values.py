"""
Configuration Values
====================

Scalar coercion for raw parameter strings and the merge rules that fold
parsed parameters into a flat configuration map.

Coercion order:
1. Numeric lexical form -> int (no fraction/exponent) or float
2. Case-insensitive "true"/"false" -> bool
3. Anything else -> the string, unchanged
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Union

from .errors import ConfigParseError

logger = logging.getLogger(__name__)

Scalar = Union[int, float, bool, str]
ConfigValue = Union[Scalar, List[Scalar]]
ConfigMap = Dict[str, ConfigValue]

ARRAY_SUFFIX = "[]"

# ASCII digits only; leading and trailing whitespace are allowed
_NUMERIC_RE = re.compile(
    r"^[ \t\n\r\v\f]*"
    r"[+-]?(?P<mantissa>\d+(?P<fraction>\.\d*)?|\.\d+)"
    r"(?P<exponent>[eE][+-]?\d+)?"
    r"[ \t\n\r\v\f]*$",
    re.ASCII,
)

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1


def is_numeric(raw: str) -> bool:
    """Return True if ``raw`` is an integer or decimal literal."""
    return _NUMERIC_RE.match(raw) is not None


def coerce_value(raw: str) -> Scalar:
    """
    Convert a raw parameter string to its typed value.

    Args:
        raw: Attribute value or inline text of a Param

    Returns:
        int, float, bool, or the original string
    """
    match = _NUMERIC_RE.match(raw)
    if match:
        text = raw.strip()
        if match.group("fraction") is None and match.group("exponent") is None \
                and not match.group("mantissa").startswith("."):
            number = int(text)
            if _INT64_MIN <= number <= _INT64_MAX:
                return number
        return float(text)

    lowered = raw.lower()
    if lowered in ("true", "false"):
        return lowered == "true"

    return raw


@dataclass(frozen=True)
class ParamEntry:
    """A single Param occurrence, in document order, with its flattened name."""

    name: str
    raw: str
    source: str = ""

    @property
    def is_array(self) -> bool:
        return self.name.endswith(ARRAY_SUFFIX)

    @property
    def key(self) -> str:
        return self.name[:-len(ARRAY_SUFFIX)] if self.is_array else self.name

    @property
    def value(self) -> Scalar:
        return coerce_value(self.raw)


def merge_param(config: ConfigMap, entry: ParamEntry) -> ConfigMap:
    """
    Store one parameter into ``config``.

    Names ending in ``[]`` append to the sequence under the base key;
    any other name overwrites the key (last write wins).
    """
    value = entry.value
    key = entry.key

    if entry.is_array:
        current = config.get(key)
        if current is None:
            config[key] = [value]
        elif isinstance(current, list):
            current.append(value)
        else:
            raise ConfigParseError(
                entry.source or key,
                f"cannot append to '{key}': it already holds the scalar {current!r}"
            )
    else:
        config[key] = value

    logger.debug(f"Stored param {key} = {value!r}")
    return config


def build_config_map(entries: Iterable[ParamEntry]) -> ConfigMap:
    """Fold an ordered sequence of parameters into a new flat map."""
    config: ConfigMap = {}
    for entry in entries:
        merge_param(config, entry)
    return config
