"""Context resolution.

A raw variant context can hold literals, nested mappings and sequences,
awaitables, and reference strings pointing at other variants' contexts:

    "@button"                    default variant's resolved context
    "@button:large"              named variant's resolved context
    "@button.size"               value at a dotted path in that context
    "@button:large.context.size" same, with an explicit ``context.`` prefix

Resolutions are memoized by a hash of the raw context. Concurrent requests
for the same raw context share one task. A reference that would wait on a
resolution that is itself waiting on the requester resolves to None instead
of deadlocking; a result cut short that way is not memoized. Each awaitable
is awaited once and its value shared by every context holding it.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections import Counter
from collections.abc import Mapping
from typing import Any

from patternkit.entities import Collection, Component, Variant
from patternkit.exceptions import ReferenceResolutionWarning
from patternkit.utils import copy_tree, get_path, has_path, hash_value

from .events import EventChannel

log = logging.getLogger(__name__)

REFERENCE_PREFIX = "@"
CONTEXT_PREFIX = "context"


def is_reference(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 1 and value.startswith(REFERENCE_PREFIX)


def parse_reference(value: str) -> tuple[str, str | None, str | None]:
    """Split ``@handle[:variant][.dotted.path]`` into its three parts."""
    body = value[len(REFERENCE_PREFIX) :]
    head, dot, path = body.partition(".")
    handle, colon, variant = head.partition(":")
    return handle, (variant or None) if colon else None, (path or None) if dot else None


class ContextResolver:
    """Resolves contexts against one entity graph.

    A resolver lives as long as the graph it was created for; the compiler
    replaces it on every rebuild, which drops the cache.
    """

    def __init__(self, root: Collection, events: EventChannel | None = None):
        self.root = root
        self.events = events
        self._index: dict[str, Component] = {}
        for component in root.flatten():
            self._index.setdefault(component.handle, component)
        self._tasks: dict[str, asyncio.Task] = {}
        self._waits: dict[str, Counter] = {}
        self._warned: set[str] = set()
        # keys whose result had a circular reference cut short
        self._partial: set[str] = set()
        # id -> (awaitable, future); an awaitable is awaited once
        self._pending: dict[int, tuple[Any, asyncio.Future]] = {}

    def __len__(self) -> int:
        return len(self._tasks)

    def clear(self) -> None:
        self._tasks.clear()
        self._warned.clear()
        self._partial.clear()
        self._pending.clear()

    def get_component(self, handle: str) -> Component | None:
        return self._index.get(handle)

    async def resolve(self, context: Any) -> Any:
        """Fully resolve ``context``. Never raises for bad references."""
        return await self._resolve_keyed(context, owner=None)

    async def resolve_variant(self, variant: Variant) -> dict[str, Any]:
        return await self.resolve(variant.context)

    # Keyed resolution ---------------------------------------------------------

    async def _resolve_keyed(self, context: Any, owner: str | None) -> Any:
        key = hash_value(context)

        if owner is not None:
            if self._reaches(key, owner):
                return _CYCLE
            self._waits.setdefault(owner, Counter())[key] += 1

        try:
            task = self._tasks.get(key)
            if task is None:
                self._partial.discard(key)
                task = asyncio.ensure_future(self._resolve_value(context, key))
                self._tasks[key] = task
            try:
                result = await asyncio.shield(task)
            except Exception:
                self._tasks.pop(key, None)
                raise
        finally:
            if owner is not None:
                self._release(owner, key)

        if key in self._partial:
            # cut short by a cycle; recomputed on the next request
            if self._tasks.get(key) is task:
                del self._tasks[key]
            if owner is not None:
                self._partial.add(owner)

        return copy_tree(result)

    def _reaches(self, start: str, target: str) -> bool:
        """Whether ``target`` is ``start`` or waited on, transitively, by it."""
        stack = [start]
        seen: set[str] = set()
        while stack:
            node = stack.pop()
            if node == target:
                return True
            if node in seen:
                continue
            seen.add(node)
            stack.extend(self._waits.get(node, ()))
        return False

    def _release(self, owner: str, key: str) -> None:
        waits = self._waits.get(owner)
        if waits is None:
            return
        waits[key] -= 1
        if waits[key] <= 0:
            del waits[key]
        if not waits:
            del self._waits[owner]

    # Values -------------------------------------------------------------------

    async def _resolve_value(self, value: Any, owner: str) -> Any:
        if inspect.isawaitable(value):
            return await self._resolve_value(await self._await_once(value), owner)

        if is_reference(value):
            return await self._resolve_reference(value, owner)

        if isinstance(value, Mapping):
            keys = list(value.keys())
            results = await asyncio.gather(
                *(self._resolve_value(value[k], owner) for k in keys)
            )
            return dict(zip(keys, results))

        if isinstance(value, (list, tuple)):
            results = await asyncio.gather(
                *(self._resolve_value(v, owner) for v in value)
            )
            return tuple(results) if isinstance(value, tuple) else list(results)

        return value

    async def _await_once(self, value: Any) -> Any:
        entry = self._pending.get(id(value))
        if entry is None or entry[0] is not value:
            entry = (value, asyncio.ensure_future(value))
            self._pending[id(value)] = entry
        return await asyncio.shield(entry[1])

    async def _resolve_reference(self, reference: str, owner: str) -> Any:
        handle, variant_handle, path = parse_reference(reference)

        component = self._index.get(handle)
        if component is None:
            self._warn(reference, f"no component with handle '{handle}'")
            return None

        if variant_handle is not None:
            target = component.get_variant(variant_handle)
            if target is None:
                self._warn(
                    reference,
                    f"component '{handle}' has no variant '{variant_handle}'",
                )
                return None
        else:
            target = component.get_default_variant()

        resolved = await self._resolve_keyed(target.context, owner)
        if resolved is _CYCLE:
            self._partial.add(owner)
            self._warn(reference, "circular reference")
            return None

        if path is None:
            return resolved
        return self._project(reference, resolved, path)

    def _project(self, reference: str, resolved: Any, path: str) -> Any:
        if has_path(resolved, path):
            return get_path(resolved, path)

        head, _, rest = path.partition(".")
        if head == CONTEXT_PREFIX and not has_path(resolved, CONTEXT_PREFIX):
            if not rest:
                return resolved
            if has_path(resolved, rest):
                return get_path(resolved, rest)

        self._warn(reference, f"path '{path}' not found")
        return None

    def _warn(self, reference: str, reason: str) -> None:
        if reference in self._warned:
            return
        self._warned.add(reference)
        warning = ReferenceResolutionWarning(reference, reason)
        log.warning(str(warning))
        if self.events is not None:
            self.events.emit("warning", warning)


class _Cycle:
    def __repr__(self) -> str:
        return "<cycle>"


_CYCLE = _Cycle()
