"""Parsing of per-directory config files and view frontmatter.

Config files are ``.json``, ``.yaml``/``.yml`` or ``.py``. A Python config
is executed in a fresh namespace and must bind a mapping named ``config``
(or a callable returning one).
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import yaml

from patternkit.exceptions import ConfigParseError
from patternkit.utils import copy_tree, hash_key

if TYPE_CHECKING:
    from patternkit.fs.record import FileRecord

log = logging.getLogger(__name__)

FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".py": "py",
}

FRONTMATTER_DELIMITER = "---"


def detect_format(filename: str) -> str | None:
    """Config format from a filename's extension, or None if unsupported."""
    dot = filename.rfind(".")
    if dot == -1:
        return None
    return FORMATS.get(filename[dot:].lower())


def parse_config(data: bytes | str, fmt: str, source: str = "<config>") -> dict[str, Any]:
    """Parse config ``data`` in ``fmt`` into a plain dict.

    Empty input yields an empty dict. Anything that is not a mapping at the
    top level is a ConfigParseError.
    """
    text = data.decode("utf-8") if isinstance(data, bytes) else data
    if not text.strip():
        return {}

    if fmt == "json":
        try:
            value = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigParseError(source, f"invalid JSON: {e}") from e
    elif fmt == "yaml":
        try:
            value = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigParseError(source, f"invalid YAML: {e}") from e
    elif fmt == "py":
        value = _exec_config(text, source)
    else:
        raise ConfigParseError(source, f"unsupported config format '{fmt}'")

    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigParseError(source, f"expected a mapping, got {type(value).__name__}")
    return dict(value)


def _exec_config(text: str, source: str) -> Any:
    namespace: dict[str, Any] = {"__name__": "__patternkit_config__", "__file__": source}
    try:
        exec(compile(text, source, "exec"), namespace)
    except Exception as e:
        raise ConfigParseError(source, f"{type(e).__name__}: {e}") from e

    if "config" not in namespace:
        raise ConfigParseError(source, "module does not define 'config'")
    value = namespace["config"]
    if callable(value):
        try:
            value = value()
        except Exception as e:
            raise ConfigParseError(source, f"config() failed: {e}") from e
    return value


def split_frontmatter(text: str, source: str = "<view>") -> tuple[dict[str, Any], str]:
    """Split a leading ``---`` YAML block off a view.

    Returns ``(config, body)``. Text without frontmatter comes back whole
    with an empty config.
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return {}, text

    for i in range(1, len(lines)):
        if lines[i].strip() == FRONTMATTER_DELIMITER:
            block = "".join(lines[1:i])
            body = "".join(lines[i + 1 :])
            return parse_config(block, "yaml", source), body

    # no closing delimiter: not frontmatter
    return {}, text


class ConfigLoader:
    """Parses config files and view frontmatter, memoized by content hash.

    The cache belongs to one compiler and is cleared on every rebuild.
    Failures are not cached.
    """

    def __init__(self) -> None:
        self._configs: dict[str, dict[str, Any]] = {}
        self._frontmatter: dict[str, tuple[dict[str, Any], str]] = {}

    def __len__(self) -> int:
        return len(self._configs) + len(self._frontmatter)

    def clear(self) -> None:
        self._configs.clear()
        self._frontmatter.clear()

    def load(self, record: FileRecord) -> dict[str, Any]:
        """Parse a config file record. Raises ConfigParseError."""
        fmt = detect_format(record.filename)
        if fmt is None:
            raise ConfigParseError(record.path, "unsupported config format")
        contents = record.contents or b""
        text = contents.decode("utf-8", errors="replace")
        key = hash_key(f"{fmt}\0{record.path}\0{text}")
        if key not in self._configs:
            log.debug(f"Parsing config {record.relative_path}")
            self._configs[key] = parse_config(text, fmt, record.path)
        return copy_tree(self._configs[key])

    def frontmatter(self, record: FileRecord) -> tuple[dict[str, Any], str]:
        """Frontmatter config and remaining body of a view record."""
        text = record.read_text() or ""
        key = hash_key(text)
        if key not in self._frontmatter:
            self._frontmatter[key] = split_frontmatter(text, record.path)
        config, body = self._frontmatter[key]
        return copy_tree(config), body
