"""Variant - one renderable instance of a component."""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from patternkit.config.settings import StatusInfo
from patternkit.exceptions import EntityFileNotFoundError
from patternkit.fs.record import FileRecord
from patternkit.utils import copy_tree

from .base import Entity, EntityRegistry

if TYPE_CHECKING:
    from .component import Component


class Variant(Entity):
    """A view plus a context, belonging to exactly one Component.

    ``context`` may still hold reference strings (``@button.size``) and
    awaitables; resolve it through the compiler before rendering.
    """

    kind = "variant"

    def __init__(
        self,
        *,
        name: str,
        handle: str,
        registry: EntityRegistry,
        component: Component,
        view: FileRecord | None,
        view_contents: str = "",
        config: dict[str, Any] | None = None,
        status: StatusInfo | None = None,
        files: list[FileRecord] | tuple[FileRecord, ...] = (),
        notes: str | None = None,
    ):
        super().__init__(
            name=name,
            handle=handle,
            registry=registry,
            config=config,
            parent=component,
            hidden=bool(view and view.hidden),
        )
        self.view = view
        self.view_contents = view_contents
        self.context: dict[str, Any] = dict(self.config.get("context") or {})
        self.display: dict[str, Any] = dict(self.config.get("display") or {})
        self.preview: str | None = self.config.get("preview")
        self.status: str | None = self.config.get("status")
        self.status_info = status or StatusInfo(label=self.status or "")
        self.notes = notes if notes is not None else self.config.get("notes")
        self.other_files: tuple[FileRecord, ...] = tuple(files)

    @property
    def component(self) -> Component:
        return self.parent  # type: ignore[return-value]

    @property
    def full_handle(self) -> str:
        return f"@{self.component.handle}:{self.handle}"

    @property
    def view_path(self) -> str | None:
        return self.view.path if self.view is not None else None

    @property
    def is_default(self) -> bool:
        return self.component.default_handle == self.handle

    @property
    def files(self) -> dict[str, Any]:
        return {"view": self.view, "other": list(self.other_files)}

    def get_file(self, base: str) -> FileRecord:
        """File of this variant by base name (order prefix stripped)."""
        candidates = ([self.view] if self.view is not None else []) + list(self.other_files)
        for f in candidates:
            if f.base == base or f.filename == base:
                return f
        raise EntityFileNotFoundError(self.full_handle, base)

    def clone(self) -> "Variant":
        """Copy with independent context, display and config; same id."""
        other = copy.copy(self)
        other.config = copy_tree(self.config)
        other.context = copy_tree(self.context)
        other.display = copy_tree(self.display)
        return other

    def to_json(self) -> dict[str, Any]:
        data = super().to_json()
        data.update(
            {
                "component": self.component.handle,
                "isDefault": self.is_default,
                "viewPath": self.view_path,
                "context": self.context,
                "display": self.display,
                "preview": self.preview,
                "status": {"handle": self.status, **self.status_info.model_dump()},
                "notes": self.notes,
            }
        )
        return data
