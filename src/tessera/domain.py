"""Domain models used throughout the library."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Parameter:
    """Describes one constructor parameter of an auto-wired class.

    Attributes:
        name: The parameter name in the constructor signature.
        declared_type: The annotated type with any ``Optional``/``Annotated``
            wrapper removed, or None when the parameter is not annotated.
        service_name: Container key given as an ``Annotated[T, "name"]`` qualifier.
        has_default: Whether the signature declares a default value.
        default: The declared default, if any.
        allows_none: Whether the annotation admits ``None``.
        type_label: Printable form of the annotation; ``"mixed"`` when untyped.
    """

    name: str
    declared_type: Optional[Any]
    service_name: Optional[str] = None
    has_default: bool = False
    default: Any = None
    allows_none: bool = False
    type_label: str = "mixed"


@dataclass(frozen=True)
class Rule:
    """A validation rule parsed from its ``name[:param]`` string form.

    Attributes:
        name: The rule name used to find a validator, e.g. ``range``.
        params: Validation context contributed by the rule's parameter.
        source: The original rule string.
    """

    name: str
    params: dict[str, Any] = field(default_factory=dict)
    source: str = ""

    def __str__(self) -> str:
        return self.source or self.name
