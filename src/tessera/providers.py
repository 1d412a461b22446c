"""Base class for grouping related container registrations."""

from abc import ABC, abstractmethod
from typing import Any, Callable

from tessera.container import ServiceContainer, ServiceKey
from tessera.factories import ClosureFactory, InstanceFactory

__all__ = ["ServiceProvider"]


class ServiceProvider(ABC):
    """Registers a cohesive set of services into a container.

    Subclasses implement :meth:`register` and may override :meth:`boot`, which
    runs once every binding of the provider is in place.

    Attributes:
        provides: Keys of the services this provider registers.
        deferred: Whether registration may be postponed until one of
            ``provides`` is first requested.

    Example:
        >>> class MailProvider(ServiceProvider):
        ...     provides = ("mailer",)
        ...
        ...     def register(self, container):
        ...         self.factory(container, "mailer", lambda: SmtpMailer("localhost"))
        >>> container.register(MailProvider())
    """

    provides: tuple[ServiceKey, ...] = ()
    deferred: bool = False

    @abstractmethod
    def register(self, container: ServiceContainer) -> None:
        ...

    def boot(self, container: ServiceContainer) -> None:
        pass

    def bind(self, container: ServiceContainer, key: ServiceKey, concrete: Any) -> None:
        container.add_factory(key, InstanceFactory(concrete))

    def singleton(self, container: ServiceContainer, key: ServiceKey, concrete: Any) -> None:
        container.add_factory(key, InstanceFactory(concrete))

    def factory(
        self, container: ServiceContainer, key: ServiceKey, factory: Callable[..., Any]
    ) -> None:
        container.add_factory(key, ClosureFactory(factory))
