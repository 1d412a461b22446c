"""Named groups of container services."""

from typing import Any, Optional

from tessera.container import ServiceKey

__all__ = ["ServiceGroup"]


class ServiceGroup:
    """A named set of service keys, each with its own options.

    Adding a service that is already in the group replaces its options and
    keeps its position.

    Attributes:
        name: The group name.
        metadata: Free-form data describing the group.
    """

    def __init__(self, name: str, metadata: Optional[dict[str, Any]] = None):
        self.name = name
        self.metadata = dict(metadata or {})
        self._services: dict[ServiceKey, dict[str, Any]] = {}

    def add_service(self, service: ServiceKey, options: Optional[dict[str, Any]] = None) -> None:
        self._services[service] = dict(options or {})

    def services(self) -> list[ServiceKey]:
        return list(self._services)

    def services_with_options(self) -> dict[ServiceKey, dict[str, Any]]:
        return {service: dict(options) for service, options in self._services.items()}

    def __contains__(self, service: ServiceKey) -> bool:
        return service in self._services
