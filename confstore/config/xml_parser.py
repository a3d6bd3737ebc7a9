"""
XML Configuration Parser
========================

Walks a namespaced XML configuration document and produces the ordered list
of parameters it defines. Three element kinds are recognised:

- Import: parses another file (path relative to the importing file) under
  the current name prefix
- Group: extends the name prefix with ``name + "/"`` for its children
- Param: a named value, from the ``value`` attribute or the inline content

Any other element is ignored.

Example::

    <glz:Config xmlns:glz="http://www.glizy.org/dtd/1.0/">
        <glz:Import src="import1.xml" />
        <glz:Group name="thumbnail">
            <glz:Param name="width" value="400" />
        </glz:Group>
    </glz:Config>
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import ConfigParseError, ConfigSourceNotFound
from .values import ParamEntry

logger = logging.getLogger(__name__)

GLIZY_NAMESPACE = "http://www.glizy.org/dtd/1.0/"

IMPORT = "Import"
GROUP = "Group"
PARAM = "Param"


class XmlConfigParser:
    """Recursive parser for Import/Group/Param configuration documents."""

    def __init__(self, namespace: str = GLIZY_NAMESPACE, skip_if_missing: bool = True):
        """
        Initialize the parser.

        Args:
            namespace: XML namespace the recognised elements live in
            skip_if_missing: Contribute nothing for missing files instead of failing
        """
        self.namespace = namespace
        self.skip_if_missing = skip_if_missing
        self._tag_prefix = "{%s}" % namespace

    def parse(self, source, prefix: str = "") -> List[ParamEntry]:
        """
        Parse a configuration file and everything it imports.

        Args:
            source: Path of the configuration file
            prefix: Name prefix applied to every parameter

        Returns:
            Parameters in document order, imports expanded in place

        Raises:
            ConfigSourceNotFound: If a file is missing and skipping is disabled
            ConfigParseError: If a file is malformed or the structure is invalid
        """
        return self._parse_file(Path(source), prefix, ())

    def parse_bytes(self, data: bytes, path, prefix: str = "") -> List[ParamEntry]:
        """Parse already-read document bytes; imports resolve relative to ``path``."""
        path = Path(path)
        root = self._parse_document(data, path)
        return self._parse_element(root, prefix, path, (path.resolve(),))

    # ------------------------------------------------------------------
    def _parse_file(self, path: Path, prefix: str, chain: Tuple[Path, ...]) -> List[ParamEntry]:
        if not path.exists():
            if self.skip_if_missing:
                logger.warning(f"Skipping missing configuration source: {path}")
                return []
            logger.error(f"Configuration source not found: {path}")
            raise ConfigSourceNotFound(path)

        resolved = path.resolve()
        if resolved in chain:
            cycle = " -> ".join(str(p) for p in chain + (resolved,))
            raise ConfigParseError(path, f"import cycle detected: {cycle}")

        try:
            data = path.read_bytes()
        except OSError as e:
            raise ConfigParseError(path, f"cannot read source: {e}") from e

        logger.debug(f"Parsing configuration source {path} (prefix '{prefix}')")
        root = self._parse_document(data, path)
        return self._parse_element(root, prefix, path, chain + (resolved,))

    def _parse_document(self, data: bytes, path: Path) -> ET.Element:
        try:
            return ET.fromstring(data)
        except ET.ParseError as e:
            line = e.position[0] if getattr(e, "position", None) else None
            logger.error(f"Malformed configuration source {path}: {e}")
            raise ConfigParseError(path, str(e), line) from e

    def _parse_element(self, element: ET.Element, prefix: str, path: Path,
                       chain: Tuple[Path, ...]) -> List[ParamEntry]:
        entries: List[ParamEntry] = []

        for node in element:
            kind = self._local_name(node)

            if kind == IMPORT:
                src = self._require(node, "src", path)
                import_path = path.parent / src
                logger.debug(f"Following import {import_path}")
                entries.extend(self._parse_file(import_path, prefix, chain))

            elif kind == GROUP:
                name = self._require(node, "name", path)
                entries.extend(self._parse_element(node, f"{prefix}{name}/", path, chain))

            elif kind == PARAM:
                name = self._require(node, "name", path)
                raw = node.get("value")
                if raw is None:
                    raw = self._inline_content(node)
                entries.append(ParamEntry(f"{prefix}{name}", raw, str(path)))

        return entries

    def _local_name(self, node: ET.Element) -> Optional[str]:
        """Element name without namespace, or None if outside our namespace."""
        tag = node.tag
        if not isinstance(tag, str) or not tag.startswith(self._tag_prefix):
            return None
        return tag[len(self._tag_prefix):]

    @staticmethod
    def _require(node: ET.Element, attribute: str, path: Path) -> str:
        value = node.get(attribute)
        if value is None:
            tag = node.tag.split("}")[-1]
            raise ConfigParseError(path, f"<{tag}> is missing the '{attribute}' attribute")
        return value

    @staticmethod
    def _inline_content(node: ET.Element) -> str:
        # CDATA arrives as plain text; nested elements are written back as markup
        parts = [node.text or ""]
        for child in node:
            parts.append(ET.tostring(child, encoding="unicode"))
        return "".join(parts)
