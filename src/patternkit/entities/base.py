"""Entity base: identity, naming and JSON projection shared by all entities.

Entities never own their parent. Each keeps the parent's id and looks it
up in the EntityRegistry of the build that created it.
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from typing import Any, ClassVar, Protocol, runtime_checkable

from patternkit.utils import coerce_order, make_id, titlize

# Config keys with a structural meaning. Everything else is a custom field
# and is carried through to_json() unchanged.
RESERVED_KEYS = frozenset(
    {
        "id",
        "kind",
        "name",
        "handle",
        "label",
        "title",
        "order",
        "hidden",
        "path",
        "type",
        "parent",
        "prefix",
        "fullHandle",
        "labelPath",
        "isRoot",
        "isDefault",
        "default",
        "defaultHandle",
        "variants",
        "items",
        "context",
        "display",
        "preview",
        "status",
        "notes",
        "notesFromFile",
        "readme",
        "tags",
        "view",
        "viewPath",
        "files",
        "component",
    }
)


@runtime_checkable
class Identifiable(Protocol):
    id: str
    handle: str


@runtime_checkable
class Orderable(Protocol):
    name: str
    order: float


@runtime_checkable
class JSONSerializable(Protocol):
    def to_json(self) -> dict[str, Any]: ...


class EntityRegistry:
    """Id index of every entity created by one build."""

    def __init__(self) -> None:
        self._entities: dict[str, Entity] = {}

    def register(self, entity: "Entity") -> None:
        self._entities[entity.id] = entity

    def unregister(self, entity: "Entity") -> None:
        self._entities.pop(entity.id, None)

    def get(self, entity_id: str | None) -> "Entity | None":
        if entity_id is None:
            return None
        return self._entities.get(entity_id)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __iter__(self) -> Iterator["Entity"]:
        return iter(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)


def child_path(parent_path: str, handle: str) -> str:
    """Path of a component or variant; an ``index`` handle takes the parent's path.

    Collections never collapse, so a collection shares no path with its parent.
    """
    if handle == "index":
        return parent_path
    return f"{parent_path}/{handle}" if parent_path else handle


def json_order(order: float) -> float | None:
    """Infinite order (no explicit order) projects to None."""
    return None if isinstance(order, float) and math.isinf(order) else order


class Entity:
    """Common identity and metadata of collections, components and variants."""

    kind: ClassVar[str] = "entity"

    def __init__(
        self,
        *,
        name: str,
        handle: str,
        registry: EntityRegistry,
        config: dict[str, Any] | None = None,
        parent: Entity | None = None,
        order: float = math.inf,
        hidden: bool = False,
    ):
        self.config: dict[str, Any] = dict(config or {})
        self.name = name
        self.handle = handle
        self.label: str = self.config.get("label") or titlize(name)
        self.title: str = self.config.get("title") or self.label
        self.order: float = coerce_order(self.config.get("order", order))
        self.hidden: bool = bool(self.config.get("hidden", hidden))
        self.parent_id: str | None = parent.id if parent is not None else None
        self.path = self._make_path(parent)
        self.id = make_id(self.kind, self.path)
        self._registry = registry
        registry.register(self)

    def _make_path(self, parent: Entity | None) -> str:
        if parent is None:
            return ""
        return child_path(parent.path, self.handle)

    @property
    def parent(self) -> Entity | None:
        return self._registry.get(self.parent_id)

    @property
    def registry(self) -> EntityRegistry:
        return self._registry

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def full_handle(self) -> str:
        return f"@{self.handle}"

    @property
    def custom_fields(self) -> dict[str, Any]:
        """Config fields without a structural meaning."""
        return {k: v for k, v in self.config.items() if k not in RESERVED_KEYS}

    def ancestors(self) -> list[Entity]:
        """Parents from the nearest up to the root."""
        out: list[Entity] = []
        current = self.parent
        while current is not None:
            out.append(current)
            current = current.parent
        return out

    def to_json(self) -> dict[str, Any]:
        data = dict(self.custom_fields)
        data.update(
            {
                "id": self.id,
                "kind": self.kind,
                "name": self.name,
                "handle": self.handle,
                "label": self.label,
                "title": self.title,
                "order": json_order(self.order),
                "hidden": self.hidden,
                "path": self.path,
                "fullHandle": self.full_handle,
            }
        )
        return data

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.handle!r} path={self.path!r}>"
