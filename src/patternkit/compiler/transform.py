"""Tree builder: FileRecord tree -> Collection / Component / Variant graph.

For every directory:

1. Child directories without any view files are skipped.
2. A child directory is a component if it holds a view named after the
   directory, or its own config says ``type: component``; otherwise it is
   a collection. View files directly inside the directory are components.
3. Children are sorted by (order, type, name) and given sibling-unique
   handles before any of them is built.
4. Children are built concurrently; the results keep the sorted order and
   empty collections are dropped.

Config precedence for an entity, lowest first: inherited cascade keys,
own config file, frontmatter of its view.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from collections.abc import Mapping
from typing import Any

from patternkit.config.cascade import cascade_entity_config
from patternkit.config.loader import ConfigLoader
from patternkit.config.settings import CompilerSettings
from patternkit.entities import Collection, Component, EntityRegistry, Variant, VariantCollection
from patternkit.entities.base import child_path
from patternkit.exceptions import ConfigParseError, PatternkitError
from patternkit.fs.matchers import Matchers
from patternkit.fs.record import (
    ROLE_ASSET,
    ROLE_VARIANT_VIEW,
    ROLE_VIEW,
    FileRecord,
)
from patternkit.utils import coerce_order, defaults_deep, slugify, split_order, unique_handle

from .events import EventChannel

log = logging.getLogger(__name__)

# Component config keys that variants do not inherit.
COMPONENT_ONLY_KEYS = frozenset(
    {
        "id",
        "name",
        "handle",
        "label",
        "title",
        "notes",
        "readme",
        "variants",
        "default",
        "tags",
        "type",
        "order",
        "hidden",
        "view",
        "prefix",
    }
)

DEFAULT_VARIANT = "default"

# Expected types of structural config keys.
CONFIG_SHAPES: dict[str, tuple[type | tuple[type, ...], str]] = {
    "context": (Mapping, "a mapping"),
    "display": (Mapping, "a mapping"),
    "variants": ((list, Mapping), "a list or a mapping"),
    "tags": (list, "a list of strings"),
    "preview": (str, "a string"),
    "status": (str, "a string"),
}


@dataclass
class _Entry:
    """A classified child of a directory, before it is built."""

    kind: str
    record: FileRecord
    name: str
    config: dict[str, Any]
    order: float
    view: FileRecord | None = None
    body: str = ""
    siblings: list[FileRecord] = field(default_factory=list)
    handle: str = ""


def _named_entry(name: str, value: Any) -> Any:
    """``variants: {large: {...}}`` form; non-mappings pass through to be rejected."""
    if value is None:
        return {"name": name}
    if isinstance(value, Mapping):
        return {"name": name, **value}
    return value


class TreeBuilder:
    """Builds the entity graph of one source tree. Does no I/O."""

    def __init__(
        self,
        settings: CompilerSettings | None = None,
        loader: ConfigLoader | None = None,
        events: EventChannel | None = None,
    ):
        self.settings = settings or CompilerSettings()
        self.matchers = Matchers(self.settings)
        self.loader = loader or ConfigLoader()
        self.events = events
        self._type_rank = {t: i for i, t in enumerate(self.settings.sort_types)}

    async def build(self, root: FileRecord, cascade: dict[str, Any] | None = None) -> Collection:
        """Build the root Collection for ``root``.

        ``cascade`` seeds the inherited config; it defaults to the settings'
        root cascade.
        """
        if not root.is_directory:
            raise PatternkitError(f"Component source {root.path} is not a directory")

        registry = EntityRegistry()
        inherited = cascade if cascade is not None else self.settings.root_cascade()
        own = self._load_config(self.matchers.directory_config(root))
        config = cascade_entity_config(inherited, own)
        name = str(own.get("name") or root.name or "components")

        collection = Collection(
            name=name,
            handle=slugify(own.get("handle") or name) or "components",
            registry=registry,
            config=config,
        )
        await self._populate(collection, root, config, registry)
        log.debug(
            f"Built {len(registry)} entities from {root.path} "
            f"({len(collection.flatten())} components)"
        )
        return collection

    # Config -------------------------------------------------------------------

    def _warn(self, error: PatternkitError) -> None:
        log.warning(str(error))
        if self.events is not None:
            self.events.emit("warning", error)

    def _load_config(self, record: FileRecord | None) -> dict[str, Any]:
        if record is None:
            return {}
        try:
            return self._check_shape(self.loader.load(record), record.path)
        except ConfigParseError as e:
            self._warn(e)
            return {}

    def _frontmatter(self, view: FileRecord | None) -> tuple[dict[str, Any], str]:
        if view is None:
            return {}, ""
        try:
            config, body = self.loader.frontmatter(view)
        except ConfigParseError as e:
            self._warn(e)
            return {}, view.read_text() or ""
        return self._check_shape(config, view.path), body

    def _check_shape(self, config: dict[str, Any], source: str) -> dict[str, Any]:
        """Drop structural keys holding the wrong type of value, warning for each."""
        for key, (expected, label) in CONFIG_SHAPES.items():
            value = config.get(key)
            if value is None:
                continue
            ok = isinstance(value, expected)
            if ok and key == "tags":
                ok = all(isinstance(t, str) for t in value)
            if not ok:
                self._warn(
                    ConfigParseError(
                        source, f"'{key}' must be {label}, got {type(value).__name__}"
                    )
                )
                del config[key]
        return config

    # Classification -------------------------------------------------------------

    def _classify_directory(self, directory: FileRecord) -> _Entry:
        own = self._load_config(self.matchers.directory_config(directory))
        files = directory.files()
        views = [f for f in files if self.matchers.is_view(f)]
        view = next((f for f in views if f.name == directory.name), None)

        declared = own.get("type")
        is_component = declared == "component" or (view is not None and declared != "collection")
        order = coerce_order(own.get("order", directory.order))

        if not is_component:
            return _Entry("collection", directory, str(own.get("name") or directory.name), own, order)

        if view is None and views:
            view = views[0]
        frontmatter, body = self._frontmatter(view)
        config = defaults_deep(frontmatter, own)
        return _Entry(
            "component",
            directory,
            str(config.get("name") or directory.name),
            config,
            coerce_order(config.get("order", directory.order)),
            view=view,
            body=body,
            siblings=files,
        )

    def _classify_file(self, view: FileRecord, files: list[FileRecord]) -> _Entry:
        own = self._load_config(self.matchers.config_for(view.name, files))
        frontmatter, body = self._frontmatter(view)
        config = defaults_deep(frontmatter, own)
        return _Entry(
            "component",
            view,
            str(config.get("name") or view.name),
            config,
            coerce_order(config.get("order", view.order)),
            view=view,
            body=body,
            siblings=files,
        )

    def _sort_key(self, entry: _Entry) -> tuple:
        rank = self._type_rank.get(entry.kind, len(self._type_rank))
        return (entry.order, rank, entry.name)

    # Collections ----------------------------------------------------------------

    async def _populate(
        self,
        collection: Collection,
        directory: FileRecord,
        config: dict[str, Any],
        registry: EntityRegistry,
    ) -> None:
        files = directory.files()
        entries: list[_Entry] = []
        for sub in directory.directories():
            if not self.matchers.has_views(sub):
                log.debug(f"Skipping {sub.relative_path or sub.path}: no views")
                continue
            entries.append(self._classify_directory(sub))
        for f in files:
            if self.matchers.is_view(f):
                entries.append(self._classify_file(f, files))

        entries.sort(key=self._sort_key)

        prefix = collection.config.get("prefix")
        seen: set[str] = set()
        for entry in entries:
            explicit = entry.config.get("handle")
            base = explicit or entry.name
            if prefix and entry.kind == "component" and not explicit:
                base = f"{prefix}-{base}"
            entry.handle = unique_handle(slugify(base) or entry.kind, seen)

        results = await asyncio.gather(
            *(self._build_entry(entry, collection, config, registry) for entry in entries)
        )

        items: list[Component | Collection] = []
        for result in results:
            if result is None:
                continue
            if isinstance(result, Collection) and len(result) == 0:
                registry.unregister(result)
                continue
            items.append(result)
        collection.attach_items(items)

    async def _build_entry(
        self,
        entry: _Entry,
        parent: Collection,
        parent_config: dict[str, Any],
        registry: EntityRegistry,
    ) -> Component | Collection | None:
        if entry.kind == "component":
            return await self._build_component(entry, parent, parent_config, registry)

        config = cascade_entity_config(parent_config, entry.config)
        collection = Collection(
            name=entry.name,
            handle=entry.handle,
            registry=registry,
            config=config,
            parent=parent,
            order=entry.order,
            hidden=entry.record.hidden,
        )
        await self._populate(collection, entry.record, config, registry)
        return collection

    # Components -----------------------------------------------------------------

    async def _build_component(
        self,
        entry: _Entry,
        parent: Collection,
        parent_config: dict[str, Any],
        registry: EntityRegistry,
    ) -> Component | None:
        config = cascade_entity_config(parent_config, entry.config)
        scope = child_path(parent.path, entry.handle)
        view_name = entry.view.name if entry.view is not None else entry.record.name

        notes = config.get("notes", config.get("readme"))
        notes_from_file = False
        assets: list[FileRecord] = []
        if entry.record.is_directory:
            if "notes" not in config and "readme" not in config:
                readme = self.matchers.readme_for(entry.siblings)
                if readme is not None:
                    notes = readme.read_text()
                    notes_from_file = True
            assets = [
                f.annotate(ROLE_ASSET, scope)
                for f in entry.siblings
                if self.matchers.role_for(f) == ROLE_ASSET
            ]

        component = Component(
            name=entry.name,
            handle=entry.handle,
            registry=registry,
            config=config,
            parent=parent,
            order=entry.order,
            hidden=entry.record.hidden,
            view=entry.view.annotate(ROLE_VIEW, scope) if entry.view is not None else None,
            files=assets,
            notes=notes,
            notes_from_file=notes_from_file,
        )

        variant_files = self.matchers.variant_views_for(view_name, entry.siblings)
        variants = self._build_variants(component, entry, config, variant_files, registry)
        if len(variants) == 0:
            log.debug(f"Skipping component {scope}: no views")
            registry.unregister(component)
            return None
        component.attach_variants(variants)
        return component

    def _variant_entries(self, raw: Any, source: str) -> list[dict[str, Any]]:
        if raw is None:
            return []
        if isinstance(raw, Mapping):
            raw = [_named_entry(k, v) for k, v in raw.items()]
        entries = []
        for item in raw:
            if not isinstance(item, Mapping):
                self._warn(
                    ConfigParseError(
                        source, f"variant entry must be a mapping, got {type(item).__name__}"
                    )
                )
                continue
            if not (item.get("name") or item.get("handle")):
                self._warn(ConfigParseError(source, "variant entry has no name"))
                continue
            entries.append(self._check_shape(dict(item), source))
        return entries

    def _build_variants(
        self,
        component: Component,
        entry: _Entry,
        config: dict[str, Any],
        variant_files: list[FileRecord],
        registry: EntityRegistry,
    ) -> VariantCollection:
        defaults = {k: v for k, v in config.items() if k not in COMPONENT_ONLY_KEYS}
        defaults.setdefault("status", self.settings.default_status)
        variants = VariantCollection(default_handle=config.get("default"))

        configured: dict[str, dict[str, Any]] = {}
        for item in self._variant_entries(config.get("variants"), entry.record.path):
            configured.setdefault(str(item.get("name") or item.get("handle")), item)

        files_by_name: dict[str, FileRecord] = {}
        for f in sorted(variant_files, key=lambda r: split_order(self.matchers.split_variant(r)[1])):
            _, name = split_order(self.matchers.split_variant(f)[1])
            files_by_name.setdefault(name, f)

        def add(name: str, own: dict[str, Any], view: FileRecord, body: str, role: str) -> None:
            vconfig = defaults_deep(own, defaults)
            handle = variants.claim(slugify(own.get("handle") or name) or "variant")
            variant = Variant(
                name=name,
                handle=handle,
                registry=registry,
                component=component,
                view=view.annotate(role, component.path),
                view_contents=body,
                config=vconfig,
                status=self.settings.status_info(vconfig.get("status")),
                files=component.files,
            )
            variants.add(variant)

        if entry.view is not None:
            add(DEFAULT_VARIANT, configured.pop(DEFAULT_VARIANT, {}), entry.view, entry.body, ROLE_VIEW)

        for name, item in configured.items():
            file = files_by_name.pop(name, None)
            if file is not None:
                frontmatter, body = self._frontmatter(file)
                add(name, defaults_deep(frontmatter, item), file, body, ROLE_VARIANT_VIEW)
            elif entry.view is not None:
                add(name, item, entry.view, entry.body, ROLE_VIEW)
            else:
                log.warning(f"Variant '{name}' of {component.handle} has no view, skipping")

        for name, file in files_by_name.items():
            frontmatter, body = self._frontmatter(file)
            add(name, frontmatter, file, body, ROLE_VARIANT_VIEW)

        return variants

