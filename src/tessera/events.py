"""Synchronous event dispatching for service and configuration lifecycle events."""

from collections import defaultdict
from typing import Any, Callable, Optional

__all__ = ["EventDispatcher", "LifecycleEvents", "Listener"]


Listener = Callable[[dict[str, Any]], None]


class LifecycleEvents:
    """Names of the events dispatched by the library."""

    BEFORE_CREATE = "service.before_create"
    AFTER_CREATE = "service.after_create"
    BEFORE_INIT = "service.before_init"
    AFTER_INIT = "service.after_init"
    BEFORE_DESTROY = "service.before_destroy"
    AFTER_DESTROY = "service.after_destroy"

    BEFORE_CONFIG_LOAD = "config.before_load"
    AFTER_CONFIG_LOAD = "config.after_load"
    BEFORE_CONFIG_MERGE = "config.before_merge"
    AFTER_CONFIG_MERGE = "config.after_merge"

    CACHE_HIT = "cache.hit"
    CACHE_MISS = "cache.miss"
    CACHE_SET = "cache.set"
    CACHE_DELETE = "cache.delete"


class EventDispatcher:
    """Calls the listeners subscribed to an event, in subscription order.

    Listeners receive the payload dictionary passed to :meth:`dispatch`.
    Exceptions raised by a listener propagate to the dispatching code.

    Example:
        >>> events = EventDispatcher()
        >>> events.subscribe(LifecycleEvents.CACHE_HIT, lambda payload: print(payload["path"]))
        >>> events.dispatch(LifecycleEvents.CACHE_HIT, {"path": "app.json"})
        app.json
    """

    def __init__(self):
        self._listeners: dict[str, list[Listener]] = defaultdict(list)

    def subscribe(self, event: str, listener: Listener) -> None:
        self._listeners[event].append(listener)

    def unsubscribe(self, event: str, listener: Listener) -> None:
        """Remove every subscription of ``listener`` to ``event``; unknown pairs are ignored."""
        if event in self._listeners:
            self._listeners[event] = [
                registered for registered in self._listeners[event] if registered != listener
            ]

    def dispatch(self, event: str, payload: Optional[dict[str, Any]] = None) -> None:
        for listener in self.listeners(event):
            listener(dict(payload or {}))

    def listeners(self, event: str) -> list[Listener]:
        return list(self._listeners.get(event, []))

    def has_listeners(self, event: str) -> bool:
        return bool(self._listeners.get(event))
