"""Cascade rules for configuration.

Two independent rules:

* ``cascade_entity_config`` - directory config flowing down to entities.
  Only ``context``, ``preview``, ``status`` and ``display`` are inherited.
* ``cascade_addons`` - list-valued add-on keys (``plugins``) merged into
  compiler settings from an overlay. Never applied to entity config.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from patternkit.utils import copy_tree, defaults_deep, unique

CASCADE_KEYS = ("context", "preview", "status", "display")
MERGED_KEYS = ("context", "display")
ADDON_KEYS = ("plugins",)


def inheritable(config: Mapping[str, Any] | None) -> dict[str, Any]:
    """The part of ``config`` that descendants inherit."""
    if not config:
        return {}
    return {k: copy_tree(config[k]) for k in CASCADE_KEYS if k in config}


def cascade_entity_config(
    parent: Mapping[str, Any] | None, own: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Merge inherited config under an entity's own config.

    ``context`` and ``display`` are deep-merged with the entity's values
    winning; ``preview`` and ``status`` are taken from the parent only when
    the entity does not set them. Other parent keys are ignored.
    """
    result = copy_tree(dict(own or {}))
    inherited = inheritable(parent)
    for key, value in inherited.items():
        if key in MERGED_KEYS:
            mine = result.get(key)
            if mine is None:
                result[key] = value
            elif isinstance(mine, Mapping) and isinstance(value, Mapping):
                result[key] = defaults_deep(mine, value)
        elif key not in result:
            result[key] = value
    return result


def cascade_addons(
    parent: Mapping[str, Any] | None, own: Mapping[str, Any] | None
) -> dict[str, list[Any]]:
    """Concatenate add-on lists parent-first, dropping duplicates.

    Returns only the add-on keys present on either side.
    """
    parent = parent or {}
    own = own or {}
    merged: dict[str, list[Any]] = {}
    for key in ADDON_KEYS:
        if key not in parent and key not in own:
            continue
        merged[key] = unique(list(parent.get(key) or []) + list(own.get(key) or []))
    return merged
