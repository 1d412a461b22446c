"""Keyed registry of factories.

The container maps service keys to :class:`~tessera.factories.Factory` objects.
Keys are either string names or types; the resolver keys auto-wired services
by their class, so ``container.get(Database)`` returns the instance that was
wired for ``Database``.
"""

import logging
from typing import Any, Callable, Union, TYPE_CHECKING

from tessera.errors import ServiceNotFoundError
from tessera.factories import ClosureFactory, Factory, InstanceFactory, LazyFactory

if TYPE_CHECKING:
    from tessera.providers import ServiceProvider

__all__ = ["ServiceContainer", "ServiceKey"]

logger = logging.getLogger(__name__)


ServiceKey = Union[str, type]
"""Type alias for keys used to look up services in a ServiceContainer.

Example:
    >>> container.get("mailer")   # Lookup by name
    >>> container.get(Database)   # Lookup by type
"""


class ServiceContainer:
    """Holds at most one factory per key; registering a key again replaces it."""

    def __init__(self):
        self._factories: dict[ServiceKey, Factory] = {}

    def add_factory(self, name: ServiceKey, factory: Factory) -> None:
        self._factories[name] = factory

    def get(self, name: ServiceKey, /, *args: Any, **kwargs: Any) -> Any:
        """Produce the service bound to ``name``.

        Args:
            name: The service key.
            *args: Positional arguments forwarded to the factory.
            **kwargs: Keyword arguments forwarded to the factory.

        Returns:
            Whatever the bound factory creates.

        Raises:
            ServiceNotFoundError: If nothing is bound to ``name``.
        """
        try:
            factory = self._factories[name]
        except KeyError:
            raise ServiceNotFoundError(name) from None
        return factory.create(*args, **kwargs)

    def has(self, name: ServiceKey, /) -> bool:
        return name in self._factories

    def __contains__(self, name: ServiceKey) -> bool:
        return self.has(name)

    def remove(self, name: ServiceKey) -> None:
        self._factories.pop(name, None)

    def names(self) -> list[ServiceKey]:
        return list(self._factories)

    def instance(self, name: ServiceKey, obj: Any) -> None:
        self.add_factory(name, InstanceFactory(obj))

    def factory(self, name: ServiceKey, fn: Callable[..., Any]) -> None:
        self.add_factory(name, ClosureFactory(fn))

    def lazy(self, name: ServiceKey, fn: Callable[..., Any]) -> None:
        self.add_factory(name, LazyFactory(fn))

    def register(self, provider: "ServiceProvider") -> None:
        """Let a provider add its bindings, then boot it."""
        logger.debug("Registering provider %s", type(provider).__name__)
        provider.register(self)
        provider.boot(self)
