"""Cache backends for :class:`~tessera.config.loader.CachedConfigLoader`."""

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

__all__ = ["Cache", "ArrayCache"]


class Cache(ABC):
    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...

    @abstractmethod
    def has(self, key: str) -> bool:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class ArrayCache(Cache):
    """In-process cache. Entries expire ``ttl`` seconds after being set.

    Entries set with a ``ttl`` of None, zero or less never expire.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._storage: dict[str, tuple[Any, Optional[float]]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if not self.has(key):
            return default
        return self._storage[key][0]

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        expires_at = self._clock() + ttl if ttl and ttl > 0 else None
        self._storage[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._storage.pop(key, None)

    def has(self, key: str) -> bool:
        entry = self._storage.get(key)
        if entry is None:
            return False
        expires_at = entry[1]
        if expires_at is not None and self._clock() >= expires_at:
            del self._storage[key]
            return False
        return True

    def clear(self) -> None:
        self._storage.clear()

    def __len__(self) -> int:
        return sum(1 for key in list(self._storage) if self.has(key))
