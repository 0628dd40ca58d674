"""Small helpers shared across the compiler: naming, merging and hashing."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from typing import Any

import xxhash

_SLUG_RE = re.compile(r"[^a-z0-9]+")
_WORD_RE = re.compile(r"[\s_\-]+")
_ORDER_RE = re.compile(r"^_?(\d+)-(.*)$")


def slugify(text: str) -> str:
    """Lowercase ``text`` and collapse anything non-alphanumeric to dashes."""
    return _SLUG_RE.sub("-", str(text).lower()).strip("-")


def titlize(text: str) -> str:
    """Turn a name like ``button-large`` into ``Button Large``."""
    words = [w for w in _WORD_RE.split(str(text)) if w]
    return " ".join(w[:1].upper() + w[1:] for w in words)


def split_order(name: str) -> tuple[float, str]:
    """Split a leading ``NN-`` order prefix off a file or directory name.

    Examples:
        >>> split_order("_01-button")
        (1, 'button')
        >>> split_order("button")
        (inf, 'button')
    """
    match = _ORDER_RE.match(name)
    if match:
        return int(match.group(1)), match.group(2)
    return float("inf"), name


def coerce_order(value: Any) -> float:
    """Numeric order from config; anything unusable sorts last."""
    if isinstance(value, bool):
        return float("inf")
    if isinstance(value, (int, float)):
        return value
    try:
        return int(str(value))
    except (TypeError, ValueError):
        return float("inf")


def unique_handle(handle: str, seen: set[str]) -> str:
    """Return ``handle``, or ``handle-N`` if it was already seen.

    The returned value is added to ``seen``.
    """
    candidate = handle
    i = 2
    while candidate in seen:
        candidate = f"{handle}-{i}"
        i += 1
    seen.add(candidate)
    return candidate


def unique(items: Iterable[Any]) -> list[Any]:
    """Deduplicate preserving first-seen order."""
    out: list[Any] = []
    for item in items:
        if item not in out:
            out.append(item)
    return out


def copy_tree(value: Any) -> Any:
    """Copy nested dicts, lists and tuples; other values are shared.

    Leaves such as pending awaitables stay the same object in the copy.
    """
    if isinstance(value, Mapping):
        return {k: copy_tree(v) for k, v in value.items()}
    if isinstance(value, list):
        return [copy_tree(v) for v in value]
    if isinstance(value, tuple):
        return tuple(copy_tree(v) for v in value)
    return value


def defaults_deep(target: Mapping[str, Any] | None, *sources: Mapping[str, Any] | None) -> dict[str, Any]:
    """Fill keys missing from ``target`` with values from ``sources``.

    Nested mappings are merged recursively; ``target`` wins on conflicts,
    then earlier sources win over later ones. Sequences are never merged.
    Inputs are not modified.
    """
    result: dict[str, Any] = copy_tree(dict(target or {}))
    for source in sources:
        if not source:
            continue
        for key, value in source.items():
            if key not in result:
                result[key] = copy_tree(value)
            elif isinstance(result[key], Mapping) and isinstance(value, Mapping):
                result[key] = defaults_deep(result[key], value)
    return result


_MISSING = object()


def get_path(value: Any, dotted: str, default: Any = None) -> Any:
    """Look up a dotted path like ``items.0.label`` in nested data."""
    current = value
    for part in dotted.split("."):
        if isinstance(current, Mapping):
            current = current.get(part, _MISSING)
        elif isinstance(current, (list, tuple)) and part.lstrip("-").isdigit():
            index = int(part)
            current = current[index] if -len(current) <= index < len(current) else _MISSING
        else:
            return default
        if current is _MISSING:
            return default
    return current


def has_path(value: Any, dotted: str) -> bool:
    """Check whether a dotted path exists in nested data."""
    return get_path(value, dotted, _MISSING) is not _MISSING


def hash_key(key: str) -> str:
    """Hash a string key with xxh64."""
    return xxhash.xxh64_hexdigest(key.encode("utf-8"))


def hash_value(value: Any) -> str:
    """Compute a content hash of arbitrary (mostly JSON-like) data.

    Serialised deterministically; values JSON cannot encode fall back to
    ``str()``, so two distinct pending objects never share a hash.
    """
    try:
        encoded = json.dumps(value, sort_keys=True, default=str)
    except TypeError:
        # mixed or non-string keys
        encoded = repr(value)
    return hash_key(encoded)


def make_id(kind: str, path: str) -> str:
    """Derive a stable entity id from its kind and structural path."""
    return hash_key(f"{kind}:{path}")
