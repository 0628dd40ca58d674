"""Compiler - parse a component source into an entity graph and serve lookups."""

from __future__ import annotations

import asyncio
import importlib
import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from patternkit.config.loader import ConfigLoader
from patternkit.config.settings import CompilerSettings
from patternkit.entities import Collection, Component, Variant
from patternkit.exceptions import (
    ComponentNotFoundError,
    PatternkitError,
    SettingsError,
    VariantNotFoundError,
)
from patternkit.fs.reader import FileSystemReader, TreeReader
from patternkit.utils import hash_value

from .cache import BuildCache
from .events import EventChannel
from .resolver import ContextResolver
from .transform import TreeBuilder

log = logging.getLogger(__name__)

Entity = Component | Variant | Collection
NotesRenderer = Callable[[str], str]


def load_plugin(ref: str) -> Callable[..., Any]:
    """Import a ``module:function`` (or ``module.function``) reference."""
    module_name, sep, attr = ref.partition(":")
    if not sep:
        module_name, _, attr = ref.rpartition(".")
    if not module_name or not attr:
        raise SettingsError("plugins", f"invalid plugin reference '{ref}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise SettingsError("plugins", f"cannot import '{module_name}': {e}") from e
    fn = getattr(module, attr, None)
    if not callable(fn):
        raise SettingsError("plugins", f"'{ref}' is not callable")
    return fn


class Compiler:
    """Entry point for consumers (CLI, dev server, static builder).

    Usage:
        compiler = Compiler("components")
        root = await compiler.parse()
        button = compiler.get("@button")
        context = await compiler.resolve_context(button)
    """

    def __init__(
        self,
        source: str | Path | TreeReader,
        settings: CompilerSettings | None = None,
        *,
        notes_renderer: NotesRenderer | None = None,
    ):
        if isinstance(source, (str, Path)):
            self.reader: TreeReader = FileSystemReader(source)
        else:
            self.reader = source
        self.settings = settings or CompilerSettings()
        self.notes_renderer = notes_renderer
        self.events = EventChannel()
        self.loader = ConfigLoader()
        self._cache: BuildCache[Collection] = BuildCache()
        self._resolver: ContextResolver | None = None
        self._plugins = [load_plugin(ref) for ref in self.settings.plugins]

    # Building -------------------------------------------------------------------

    @property
    def dirty(self) -> bool:
        return self._cache.dirty

    @property
    def root(self) -> Collection | None:
        """The last built graph, if any."""
        return self._cache.value

    @property
    def builds(self) -> int:
        return self._cache.builds

    def source_hash(self) -> str:
        """Hash of the source signature and the settings."""
        return hash_value(
            {
                "files": self.reader.signature(),
                "settings": self.settings.model_dump(mode="json"),
            }
        )

    async def parse(self) -> Collection:
        """Current entity graph, rebuilt if dirty or the source changed."""
        source_hash = await asyncio.to_thread(self.source_hash)
        return await self._cache.get_or_build(source_hash, self._build)

    async def _build(self) -> Collection:
        record = await asyncio.to_thread(self.reader.read)
        self.loader.clear()
        builder = TreeBuilder(self.settings, loader=self.loader, events=self.events)
        root = await builder.build(record, self.settings.root_cascade())
        self._resolver = ContextResolver(root, events=self.events)

        for plugin in self._plugins:
            plugin(root, self.settings)

        log.info(f"Loaded {len(root.flatten())} components from {record.path}")
        self.events.emit("loaded", root)
        return root

    def notify(self, event: str, path: str | Path) -> None:
        """Watcher hook: any change marks the graph dirty."""
        log.debug(f"Source {event}: {path}")
        self._cache.invalidate()
        self.events.emit("changed", {"event": event, "path": str(path)})

    # Lookup ---------------------------------------------------------------------

    def _require_root(self) -> Collection:
        root = self._cache.value
        if root is None:
            raise PatternkitError("Components have not been parsed yet; await parse() first")
        return root

    def find(self, ref: str) -> Entity | None:
        """Look up ``@handle``, ``@handle:variant`` or a slash path.

        A path whose last segment contains the splitter selects a variant
        (``forms/button--large``). Returns None when nothing matches.
        """
        root = self._require_root()
        ref = ref.strip()
        if not ref:
            return None

        if ref.startswith("@"):
            handle, sep, variant = ref[1:].partition(":")
            target = root.find_by_handle(handle)
            if not sep:
                return target
            if isinstance(target, Component):
                return target.get_variant(variant)
            return None

        found = root.find_by_path(ref)
        if found is not None:
            return found
        head, _, last = ref.strip("/").rpartition("/")
        name, sep, variant = last.partition(self.settings.splitter)
        if not sep:
            return None
        component = root.find_by_path(f"{head}/{name}" if head else name)
        if isinstance(component, Component):
            return component.get_variant(variant)
        return None

    def get(self, ref: str) -> Entity:
        """Like ``find`` but raises ComponentNotFoundError / VariantNotFoundError."""
        found = self.find(ref)
        if found is not None:
            return found

        handle, sep, variant = ref.lstrip("@").partition(":")
        if sep and isinstance(self._require_root().find_by_handle(handle), Component):
            raise VariantNotFoundError(handle, variant)
        raise ComponentNotFoundError(ref)

    def exists(self, ref: str) -> bool:
        return self.find(ref) is not None

    # Context --------------------------------------------------------------------

    async def resolve_context(self, target: Variant | Component | str) -> dict[str, Any]:
        """Fully resolved context of a variant (a component means its default)."""
        await self.parse()
        if isinstance(target, str):
            target = self.get(target)
        if isinstance(target, Collection):
            raise PatternkitError(f"{target.handle} is a collection, not a component")
        if isinstance(target, Component):
            target = target.get_default_variant()
        if self._resolver is None:
            raise PatternkitError("No context resolver; the source has not been built")
        return await self._resolver.resolve(target.context)

    def render_notes(self, entity: Component | Variant) -> str | None:
        if entity.notes is None or self.notes_renderer is None:
            return entity.notes
        return self.notes_renderer(entity.notes)
