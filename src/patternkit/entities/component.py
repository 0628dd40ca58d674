"""Component - a named unit owning one or more variants."""

from __future__ import annotations

from typing import Any

from patternkit.config.settings import StatusInfo
from patternkit.exceptions import InvariantError, VariantNotFoundError
from patternkit.fs.record import FileRecord
from patternkit.utils import unique

from .base import Entity, EntityRegistry
from .variant import Variant
from .variant_collection import VariantCollection


class Component(Entity):
    """A component and its variants.

    Built in two steps by the tree builder: the component itself, then its
    variants (which need the component's id) via ``attach_variants``. A
    component is only handed out once it has at least one variant.
    """

    kind = "component"

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
        view: FileRecord | None = None,
        files: list[FileRecord] | tuple[FileRecord, ...] = (),
        notes: str | None = None,
        notes_from_file: bool = False,
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
        self.view = view
        self.files: tuple[FileRecord, ...] = tuple(files)
        self.notes = notes
        self.notes_from_file = notes_from_file
        self.context: dict[str, Any] = dict(self.config.get("context") or {})
        self.display: dict[str, Any] = dict(self.config.get("display") or {})
        self.preview: str | None = self.config.get("preview")
        own_tags = list(self.config.get("tags") or [])
        parent_tags = list(getattr(parent, "tags", []) or [])
        self.tags: list[str] = unique(own_tags + parent_tags)
        self._variants: VariantCollection | None = None

    def attach_variants(self, variants: VariantCollection) -> None:
        if len(variants) == 0:
            raise InvariantError(f"Component '{self.handle}' has no variants")
        self._variants = variants

    @property
    def variants(self) -> VariantCollection:
        if self._variants is None:
            raise InvariantError(f"Component '{self.handle}' has no variants")
        return self._variants

    @property
    def view_path(self) -> str | None:
        return self.view.path if self.view is not None else None

    @property
    def default_handle(self) -> str:
        return self.get_default_variant().handle

    def get_variants(self) -> list[Variant]:
        return list(self.variants)

    def get_variant(self, handle: str | None) -> Variant | None:
        return self.variants.get(handle)

    def variant(self, handle: str) -> Variant:
        """Variant by handle. Raises VariantNotFoundError."""
        found = self.variants.get(handle)
        if found is None:
            raise VariantNotFoundError(self.handle, handle)
        return found

    def get_variant_or_default(self, handle: str | None = None) -> Variant:
        return self.variants.get_or_default(handle)

    def get_default_variant(self) -> Variant:
        return self.variants.default()

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    @property
    def statuses(self) -> list[str]:
        """Distinct variant status handles, in variant order."""
        return unique(v.status for v in self.variants if v.status)

    @property
    def status(self) -> list[StatusInfo]:
        infos: list[StatusInfo] = []
        for handle in self.statuses:
            info = next(v.status_info for v in self.variants if v.status == handle)
            infos.append(info)
        return infos

    def to_json(self) -> dict[str, Any]:
        data = super().to_json()
        data.update(
            {
                "tags": self.tags,
                "notes": self.notes,
                "notesFromFile": self.notes_from_file,
                "viewPath": self.view_path,
                "context": self.context,
                "display": self.display,
                "preview": self.preview,
                "status": [
                    {"handle": h, **info.model_dump()}
                    for h, info in zip(self.statuses, self.status)
                ],
                "defaultHandle": self.default_handle,
                "variants": self.variants.to_json(),
            }
        )
        return data
