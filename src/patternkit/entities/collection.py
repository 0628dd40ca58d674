"""Collection - an ordered, nested group of components and collections."""

from __future__ import annotations

import copy
from collections.abc import Iterator
from typing import Any, Union

from patternkit.utils import get_path, unique

from .base import Entity, EntityRegistry
from .component import Component
from .variant import Variant

Item = Union[Component, "Collection"]

_MISSING = object()


def _matches(entity: Entity, key: str, value: Any) -> bool:
    actual = getattr(entity, key, _MISSING)
    if actual is _MISSING or callable(actual):
        actual = get_path(entity.config, key, _MISSING)
    if actual is _MISSING:
        return False
    if isinstance(actual, (list, tuple, set, frozenset)):
        return value in actual
    return actual == value


class Collection(Entity):
    """Mirror of one source directory."""

    kind = "collection"

    def __init__(
        self,
        *,
        name: str,
        handle: str,
        registry: EntityRegistry,
        config: dict[str, Any] | None = None,
        parent: Entity | None = None,
        order: float = float("inf"),
        hidden: bool = False,
    ):
        super().__init__(
            name=name,
            handle=handle,
            registry=registry,
            config=config,
            parent=parent,
            order=order,
            hidden=hidden,
        )
        own_tags = list(self.config.get("tags") or [])
        parent_tags = list(getattr(parent, "tags", []) or [])
        self.tags: list[str] = unique(own_tags + parent_tags)
        self._items: list[Item] = []

    def _make_path(self, parent: Entity | None) -> str:
        # an index collection keeps its own segment; only leaves collapse
        if parent is None:
            return ""
        return f"{parent.path}/{self.handle}" if parent.path else self.handle

    def attach_items(self, items: list[Item]) -> None:
        """Set children; the tree builder passes them already sorted."""
        self._items = list(items)

    @property
    def label_path(self) -> str:
        labels = [e.label for e in reversed(self.ancestors()) if not e.is_root]
        if not self.is_root:
            labels.append(self.label)
        return " / ".join(labels)

    @property
    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def items(self) -> list[Item]:
        return list(self._items)

    def components(self) -> list[Component]:
        return [i for i in self._items if isinstance(i, Component)]

    def collections(self) -> list["Collection"]:
        return [i for i in self._items if isinstance(i, Collection)]

    def flatten(self) -> list[Component]:
        """Every component below this collection, depth first in sort order."""
        out: list[Component] = []
        for item in self._items:
            if isinstance(item, Collection):
                out.extend(item.flatten())
            else:
                out.append(item)
        return out

    def flatten_collections(self) -> list["Collection"]:
        out: list[Collection] = []
        for child in self.collections():
            out.append(child)
            out.extend(child.flatten_collections())
        return out

    def filter(self, key: str, value: Any) -> "Collection":
        """Copy keeping only components where ``key`` matches ``value``.

        List-valued attributes (``tags``, ``statuses``) match by membership.
        Sub-collections left empty are dropped.
        """
        return self._prune(lambda c: _matches(c, key, value))

    def exclude(self, key: str, value: Any) -> "Collection":
        return self._prune(lambda c: not _matches(c, key, value))

    def _prune(self, keep) -> "Collection":
        items: list[Item] = []
        for item in self._items:
            if isinstance(item, Collection):
                pruned = item._prune(keep)
                if len(pruned):
                    items.append(pruned)
            elif keep(item):
                items.append(item)
        other = copy.copy(self)
        other._items = items
        return other

    def find_by_handle(self, handle: str) -> Item | None:
        """Depth-first search for a component or collection by handle."""
        for item in self._items:
            if item.handle == handle:
                return item
            if isinstance(item, Collection):
                found = item.find_by_handle(handle)
                if found is not None:
                    return found
        return None

    def find_by_path(self, path: str) -> Item | None:
        """Lookup by slash-delimited handle path relative to this collection."""
        target = path.strip("/")
        if not target:
            return self
        if self.path:
            target = f"{self.path}/{target}"
        return self._find_path(target)

    def _find_path(self, target: str) -> Item | None:
        for item in self._items:
            if item.path == target:
                return item
            if isinstance(item, Collection) and (
                not item.path or target.startswith(item.path + "/")
            ):
                found = item._find_path(target)
                if found is not None:
                    return found
        return None

    def variants(self) -> list[Variant]:
        return [v for c in self.flatten() for v in c.get_variants()]

    def to_json(self) -> dict[str, Any]:
        data = super().to_json()
        data.update(
            {
                "isRoot": self.is_root,
                "labelPath": self.label_path,
                "tags": self.tags,
                "items": [item.to_json() for item in self._items],
            }
        )
        return data
