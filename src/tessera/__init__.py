"""Tessera dependency injection and configuration toolkit.

Tessera is a small library for wiring services together and for loading and
validating their configuration. Services are bound to keys in a container,
either explicitly through factories or implicitly by auto-wiring a class's
constructor from its type hints.

Key Features:
    - Factory based service container keyed by name or type
    - Constructor auto-wiring with interface binding and cycle detection
    - Configuration store with rule-string validation (``required``, ``type:int``,
      ``range:1-65535``, ``regex:/^[a-z]+$/``)
    - JSON and YAML config loading with mtime-keyed caching and deep merging

Basic Usage:
    >>> from tessera.container import ServiceContainer
    >>> from tessera.resolver import DependencyResolver
    >>>
    >>> container = ServiceContainer()
    >>> resolver = DependencyResolver(container)
    >>> resolver.bind_interface(EngineInterface, Engine)
    >>> car = resolver.resolve(Car)
    >>> car.drive()
    'Engine started - Car is driving'

The library consists of several modules:
    - container: The service container and its key type
    - factories: Instance, closure and lazy factories
    - resolver: Constructor auto-wiring
    - introspection: Constructor parameter analysis
    - providers: Base class for grouped registrations
    - tags: Tagging services for group lookup
    - config: Configuration store, validators, loaders and merging
    - domain: Core domain models (Parameter, Rule)
    - errors: Library-specific exceptions
"""
