"""Synchronous event channel for compiler notifications.

Events:
- ``warning``: ConfigParseError or ReferenceResolutionWarning
- ``changed``: ``{"event": ..., "path": ...}`` from a watcher
- ``loaded``: the freshly built root Collection
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any

log = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventChannel:
    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> Listener:
        """Subscribe ``listener`` to ``event``. Returns the listener."""
        self._listeners[event].append(listener)
        return listener

    def off(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, event: str, payload: Any = None) -> None:
        listeners = list(self._listeners.get(event, []))
        log.debug(f"Emitting {event} to {len(listeners)} listener(s)")
        for listener in listeners:
            listener(payload)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))
