"""Hierarchical merging of configuration mappings."""

import copy
import logging
from collections.abc import Mapping
from typing import Any, Optional

from tessera.events import EventDispatcher, LifecycleEvents

__all__ = ["HierarchicalConfigMerger"]

logger = logging.getLogger(__name__)


class HierarchicalConfigMerger:
    """Deep-merges configuration mappings, later ones taking precedence.

    Nested mappings are merged key by key. Any other value, lists included,
    replaces the earlier value at the same path. Lists are therefore replaced
    whole rather than merged by index: ``[1, 2, 3]`` followed by ``[9]`` gives
    ``[9]``, not ``[9, 2, 3]``. The inputs are not modified.

    Args:
        events: Optional dispatcher notified before and after each merge. The
            payload carries the number of mappings as ``count``.

    Example:
        >>> HierarchicalConfigMerger().merge(
        ...     {"app": {"name": "Dino", "debug": False}},
        ...     {"app": {"debug": True}},
        ... )
        {'app': {'name': 'Dino', 'debug': True}}
    """

    def __init__(self, events: Optional[EventDispatcher] = None):
        self._events = events

    def merge(self, *configs: Mapping[str, Any]) -> dict[str, Any]:
        if self._events is not None:
            self._events.dispatch(LifecycleEvents.BEFORE_CONFIG_MERGE, {"count": len(configs)})

        merged: dict[str, Any] = {}
        for config in configs:
            _merge_into(merged, config)
        logger.debug("Merged %d config(s)", len(configs))

        if self._events is not None:
            self._events.dispatch(LifecycleEvents.AFTER_CONFIG_MERGE, {"count": len(configs)})
        return merged


def _merge_into(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, dict) and isinstance(value, Mapping):
            _merge_into(existing, value)
        elif isinstance(value, Mapping):
            target[key] = {}
            _merge_into(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
