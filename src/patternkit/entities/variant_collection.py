"""Ordered, handle-unique set of a component's variants."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from patternkit.exceptions import InvariantError
from patternkit.utils import slugify, unique_handle

from .variant import Variant


class VariantCollection:
    """Variants of one component in insertion order.

    Handles are reserved with ``claim`` before a variant is constructed (a
    variant's id depends on its handle), then the variant is ``add``-ed.
    """

    def __init__(self, default_handle: str | None = None):
        self.default_handle = slugify(default_handle) if default_handle else None
        self._items: list[Variant] = []
        self._by_handle: dict[str, Variant] = {}
        self._seen: set[str] = set()

    def claim(self, handle: str) -> str:
        """Reserve ``handle``, disambiguated with a numeric suffix if taken."""
        return unique_handle(handle, self._seen)

    def add(self, variant: Variant) -> Variant:
        if variant.handle in self._by_handle:
            raise InvariantError(
                f"Duplicate variant handle '{variant.handle}' in {variant.component.handle}"
            )
        self._seen.add(variant.handle)
        self._items.append(variant)
        self._by_handle[variant.handle] = variant
        return variant

    def get(self, handle: str | None) -> Variant | None:
        if not handle:
            return None
        return self._by_handle.get(handle)

    def default(self) -> Variant:
        """The declared default if it names a variant, else the first one."""
        if not self._items:
            raise InvariantError("Variant collection is empty")
        declared = self.get(self.default_handle)
        return declared if declared is not None else self._items[0]

    def get_or_default(self, handle: str | None = None) -> Variant:
        found = self.get(handle)
        return found if found is not None else self.default()

    def handles(self) -> list[str]:
        return [v.handle for v in self._items]

    def __iter__(self) -> Iterator[Variant]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, handle: object) -> bool:
        return handle in self._by_handle

    def to_json(self) -> list[dict[str, Any]]:
        return [v.to_json() for v in self._items]
