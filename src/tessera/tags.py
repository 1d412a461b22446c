"""Tagging of container services, for retrieving groups of related services."""

from collections import defaultdict
from typing import Any, Iterable

from tessera.container import ServiceContainer, ServiceKey

__all__ = ["ServiceTagRegistry"]


class ServiceTagRegistry:
    """Associates service keys with free-form tags.

    Tags are kept in the order they were added; a key may carry the same tag
    more than once without being listed twice by :meth:`services_tagged`.
    """

    def __init__(self):
        self._tags: dict[ServiceKey, list[str]] = defaultdict(list)

    def add_tag(self, service: ServiceKey, tag: str) -> None:
        self._tags[service].append(tag)

    def tag_service(self, service: ServiceKey, tags: Iterable[str]) -> None:
        for tag in tags:
            self.add_tag(service, tag)

    def tags_for(self, service: ServiceKey) -> list[str]:
        return list(self._tags.get(service, []))

    def services_tagged(self, tag: str) -> list[ServiceKey]:
        return [service for service, tags in self._tags.items() if tag in tags]

    def tagged(self, container: ServiceContainer, tag: str) -> dict[ServiceKey, Any]:
        """Produce every service carrying ``tag`` that the container can provide.

        Tagged keys with no binding in ``container`` are skipped.
        """
        return {
            service: container.get(service)
            for service in self.services_tagged(tag)
            if container.has(service)
        }
