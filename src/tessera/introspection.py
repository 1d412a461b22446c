"""Constructor introspection used by the auto-wiring resolver."""

import inspect
from types import NoneType, UnionType
from typing import (
    Annotated,
    Any,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from tessera.domain import Parameter
from tessera.errors import ServiceResolutionError

__all__ = [
    "constructor_parameters",
    "has_constructor",
    "is_instantiable",
    "is_interface",
    "is_service_type",
]

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def has_constructor(cls: type) -> bool:
    """Whether ``cls`` (or a base other than ``object``) defines ``__init__``."""
    return cls.__init__ is not object.__init__


def is_interface(target: Any) -> bool:
    """Abstract classes and Protocols can only be resolved through a binding."""
    return inspect.isclass(target) and (
        inspect.isabstract(target) or getattr(target, "_is_protocol", False)
    )


def is_instantiable(target: Any) -> bool:
    return inspect.isclass(target) and not is_interface(target)


def is_service_type(declared_type: Any) -> bool:
    """Whether a parameter of this type should be wired from the container.

    Builtin scalars and collections (``int``, ``str``, ``list`` ...) and
    parameterised generics such as ``list[str]`` are values, not services.

    Example:
        >>> is_service_type(Database)  # True
        >>> is_service_type(int)       # False
        >>> is_service_type(dict[str, int])  # False
    """
    return inspect.isclass(declared_type) and declared_type.__module__ != "builtins"


def constructor_parameters(cls: type) -> list[Parameter]:
    """Describe the parameters of ``cls.__init__`` in declaration order.

    ``self`` and variadic ``*args``/``**kwargs`` parameters are not reported.

    Args:
        cls: The class to analyse.

    Returns:
        One :class:`Parameter` per injectable constructor parameter.

    Raises:
        ServiceResolutionError: If an annotation refers to a name that cannot be
            evaluated.

    Example:
        >>> class Service:
        ...     def __init__(self, untyped, db: Database, cache: Annotated[Cache, "redis"]):
        ...         pass
        >>> constructor_parameters(Service)
        >>> # [Parameter("untyped", None),
        >>> #  Parameter("db", Database, type_label="Database"),
        >>> #  Parameter("cache", Cache, service_name="redis", type_label="Cache")]
    """
    init = cls.__init__
    try:
        hints = get_type_hints(init, include_extras=True)
    except NameError as e:
        raise ServiceResolutionError(cls, {"reason": f"Unresolvable annotation: {e}"}) from e

    parameters = list(inspect.signature(init).parameters.values())[1:]
    return [
        _make_parameter(parameter, hints.get(parameter.name))
        for parameter in parameters
        if parameter.kind not in _SKIPPED_KINDS
    ]


def _make_parameter(parameter: inspect.Parameter, annotation: Any) -> Parameter:
    has_default = parameter.default is not inspect.Parameter.empty
    default = parameter.default if has_default else None

    if annotation is None:
        return Parameter(parameter.name, None, None, has_default, default, False)

    service_name = None
    if get_origin(annotation) is Annotated:
        annotation, *metadata = get_args(annotation)
        service_name = next((m for m in metadata if isinstance(m, str)), None)

    declared_type, allows_none = _unwrap_optional(annotation)
    return Parameter(
        parameter.name,
        declared_type,
        service_name,
        has_default,
        default,
        allows_none,
        _type_label(annotation),
    )


def _unwrap_optional(annotation: Any) -> tuple[Any, bool]:
    """Split ``Optional[T]`` into ``(T, True)``; other annotations are returned as-is."""
    if annotation is Any:
        return annotation, True
    if annotation is None or annotation is NoneType:
        return None, True

    if get_origin(annotation) in (Union, UnionType):
        members = get_args(annotation)
        allows_none = NoneType in members
        remaining = [m for m in members if m is not NoneType]
        if len(remaining) == 1:
            inner, inner_allows_none = _unwrap_optional(remaining[0])
            return inner, allows_none or inner_allows_none
        return Union[tuple(remaining)], allows_none

    return annotation, False


def _type_label(annotation: Any) -> str:
    if inspect.isclass(annotation) and get_origin(annotation) is None:
        return annotation.__name__
    return str(annotation).replace("typing.", "")
