"""Constructor auto-wiring on top of a :class:`~tessera.container.ServiceContainer`.

:class:`DependencyResolver` reflects a class's constructor and asks a
:class:`ParameterResolver` for each argument. Parameters annotated with a
service type are taken from the container, or wired recursively when the
container has nothing bound for them. Every instance built by
:meth:`DependencyResolver.resolve` is registered back into the container under
its class, so resolved services behave as singletons.

Cycles are detected along the current recursion path: the parameter resolver
keeps the set of service keys being resolved, and re-entering one of them
raises :class:`~tessera.errors.CircularDependencyError`. A diamond (two
services sharing a dependency) is not a cycle; the shared dependency is built
once and reused from the container.

A ParameterResolver is not thread-safe. Concurrent resolutions must each use
their own resolver, or hold a lock for the whole call.
"""

import logging
from typing import Any, Optional

from tessera.container import ServiceContainer, ServiceKey
from tessera.domain import Parameter
from tessera.errors import (
    CircularDependencyError,
    InterfaceNotBoundError,
    ServiceNotFoundError,
    ServiceResolutionError,
    UnresolvableParameterError,
)
from tessera.factories import ClosureFactory, InstanceFactory
from tessera.introspection import (
    constructor_parameters,
    has_constructor,
    is_instantiable,
    is_interface,
    is_service_type,
)

__all__ = ["DependencyResolver", "ParameterResolver"]

logger = logging.getLogger(__name__)


class ParameterResolver:
    """Resolves the value of a single constructor parameter."""

    def __init__(self):
        self._resolving: list[ServiceKey] = []

    @property
    def resolving_types(self) -> frozenset[ServiceKey]:
        """Service keys currently being resolved further up the call stack."""
        return frozenset(self._resolving)

    def resolve(self, parameter: Parameter, container: ServiceContainer) -> Any:
        """Find a value for ``parameter``.

        Args:
            parameter: The parameter to satisfy.
            container: The container to look services up in and to register
                newly wired services into.

        Returns:
            The service for service-typed parameters, otherwise the declared
            default, or None when the annotation admits it.

        Raises:
            CircularDependencyError: If the service is already being resolved.
            UnresolvableParameterError: If a value-typed parameter has neither a
                default nor an optional annotation.
        """
        key = self._service_key(parameter)
        if key is None:
            return self._resolve_value(parameter)

        if key in self._resolving:
            raise CircularDependencyError(
                key,
                {
                    "parameter": parameter.name,
                    "chain": [_label(k) for k in self._resolving + [key]],
                },
            )

        self._resolving.append(key)
        try:
            if container.has(key):
                return container.get(key)
            if isinstance(key, str):
                raise ServiceNotFoundError(key, {"parameter": parameter.name})
            return DependencyResolver(container, self).resolve(key)
        finally:
            self._resolving.remove(key)

    @staticmethod
    def _service_key(parameter: Parameter) -> Optional[ServiceKey]:
        if parameter.service_name is not None:
            return parameter.service_name
        if is_service_type(parameter.declared_type):
            return parameter.declared_type
        return None

    @staticmethod
    def _resolve_value(parameter: Parameter) -> Any:
        if parameter.has_default:
            return parameter.default
        if parameter.allows_none:
            return None
        raise UnresolvableParameterError(
            parameter.name,
            {"type": parameter.type_label, "reason": "Parameter could not be resolved"},
        )


class DependencyResolver:
    """Instantiates classes by wiring their constructor parameters.

    The resolver borrows the container; it may be discarded at any time without
    affecting the services it has registered.

    Example:
        >>> container = ServiceContainer()
        >>> resolver = DependencyResolver(container)
        >>> resolver.bind_interface(EngineInterface, Engine)
        >>> car = resolver.resolve(Car)
        >>> car is container.get(Car)
        True
    """

    def __init__(
        self,
        container: ServiceContainer,
        parameter_resolver: Optional[ParameterResolver] = None,
    ):
        self._container = container
        self._parameter_resolver = parameter_resolver or ParameterResolver()

    def resolve(self, cls: type) -> Any:
        """Return the container's instance of ``cls``, wiring and caching it if needed.

        Raises:
            ServiceResolutionError: If ``cls`` is not an instantiable class.
            InterfaceNotBoundError: If ``cls`` is abstract and nothing is bound to it.
            CircularDependencyError: If the constructor graph contains a cycle.
            UnresolvableParameterError: If a constructor parameter has no value.
        """
        if self._container.has(cls):
            logger.debug("Returning bound instance of %s", _label(cls))
            return self._container.get(cls)

        instance = self._build(cls, {})
        self._container.add_factory(cls, InstanceFactory(instance))
        return instance

    def resolve_with(self, cls: type, custom_parameters: Optional[dict[str, Any]] = None) -> Any:
        """Like :meth:`resolve`, but named constructor arguments can be supplied.

        Values in ``custom_parameters`` are passed verbatim to the constructor
        parameter of the same name. Instances built with custom parameters are
        neither taken from nor stored in the container; with no custom
        parameters this behaves exactly like :meth:`resolve`.
        """
        custom_parameters = custom_parameters or {}
        if not custom_parameters:
            return self.resolve(cls)

        return self._build(cls, custom_parameters)

    def bind_interface(self, interface: ServiceKey, implementation: type) -> None:
        """Bind ``interface`` so that requesting it resolves ``implementation``.

        The implementation is resolved on first request, not at bind time.
        """
        logger.debug("Binding %s to %s", _label(interface), _label(implementation))
        self._container.add_factory(
            interface, ClosureFactory(lambda: self.resolve(implementation))
        )

    def _build(self, cls: type, custom_parameters: dict[str, Any]) -> Any:
        if not is_instantiable(cls):
            if is_interface(cls):
                raise InterfaceNotBoundError(cls, {"reason": "Class is not instantiable"})
            raise ServiceResolutionError(cls, {"reason": "Not a class"})

        if not has_constructor(cls):
            logger.debug("Instantiating %s without constructor", _label(cls))
            return cls()

        arguments = {}
        for parameter in constructor_parameters(cls):
            if parameter.name in custom_parameters:
                arguments[parameter.name] = custom_parameters[parameter.name]
            else:
                arguments[parameter.name] = self._parameter_resolver.resolve(
                    parameter, self._container
                )

        logger.debug("Instantiating %s with %s", _label(cls), sorted(arguments))
        return cls(**arguments)


def _label(key: Any) -> str:
    return key.__qualname__ if isinstance(key, type) else str(key)
