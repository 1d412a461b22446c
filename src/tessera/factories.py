"""Factories produce the objects a :class:`~tessera.container.ServiceContainer` hands out.

A factory is bound to a key in the container; every ``container.get(key, ...)``
forwards its arguments to the factory's :meth:`Factory.create`.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

__all__ = ["Factory", "InstanceFactory", "ClosureFactory", "LazyFactory"]


class Factory(ABC):
    """Produces a service on demand."""

    @abstractmethod
    def create(self, *args: Any, **kwargs: Any) -> Any:
        ...


class InstanceFactory(Factory):
    """Always returns the same, already constructed object. Arguments are ignored."""

    def __init__(self, instance: Any):
        self._instance = instance

    def create(self, *args: Any, **kwargs: Any) -> Any:
        return self._instance


class ClosureFactory(Factory):
    """Invokes a callable on every request, passing through the caller's arguments."""

    def __init__(self, closure: Callable[..., Any]):
        self._closure = closure

    def create(self, *args: Any, **kwargs: Any) -> Any:
        return self._closure(*args, **kwargs)


class LazyFactory(Factory):
    """Invokes its callable on the first request only and memoises the result.

    Arguments given after the first call are ignored.

    Example:
        >>> factory = LazyFactory(lambda: Database("sqlite://"))
        >>> factory.initialized
        False
        >>> factory.create() is factory.create()
        True
    """

    _UNSET = object()

    def __init__(self, factory: Callable[..., Any]):
        self._factory = factory
        self._instance = self._UNSET

    def create(self, *args: Any, **kwargs: Any) -> Any:
        if self._instance is self._UNSET:
            self._instance = self._factory(*args, **kwargs)
        return self._instance

    @property
    def initialized(self) -> bool:
        return self._instance is not self._UNSET
