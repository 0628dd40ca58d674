"""Entity model: collections, components and variants."""

from .base import (
    RESERVED_KEYS,
    Entity,
    EntityRegistry,
    Identifiable,
    JSONSerializable,
    Orderable,
)
from .collection import Collection
from .component import Component
from .variant import Variant
from .variant_collection import VariantCollection

__all__ = [
    "RESERVED_KEYS",
    "Collection",
    "Component",
    "Entity",
    "EntityRegistry",
    "Identifiable",
    "JSONSerializable",
    "Orderable",
    "Variant",
    "VariantCollection",
]
