"""Pluggable validators for configuration values.

A validator advertises the rule names it handles through :meth:`Validator.supports`
and raises :class:`~tessera.errors.ValidationError` from
:meth:`Validator.validate` when a value breaks the rule. The validation context
combines the caller's context, the rule's own parameters and the key being
set (``config_key``).

A :class:`ValidatorRegistry` holds validators in registration order; the first
one supporting a rule handles it.
"""

import math
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Optional

from tessera.errors import ValidationError, ValidatorNotFoundError

__all__ = [
    "Validator",
    "RequiredValidator",
    "TypeValidator",
    "RangeValidator",
    "RegexValidator",
    "ValidatorRegistry",
    "compile_pattern",
    "normalize_type_name",
    "type_name_of",
]


class Validator(ABC):
    @abstractmethod
    def supports(self, rule: str) -> bool:
        ...

    @abstractmethod
    def validate(self, value: Any, context: dict[str, Any]) -> None:
        ...


class RequiredValidator(Validator):
    """Rejects ``None`` and the empty string."""

    def supports(self, rule: str) -> bool:
        return rule == "required"

    def validate(self, value: Any, context: dict[str, Any]) -> None:
        if value is None or value == "":
            raise ValidationError(
                "Value is required and cannot be empty", {**context, "rule": "required"}
            )


_TYPE_ALIASES = {
    "str": "string",
    "integer": "int",
    "boolean": "bool",
    "double": "float",
    "list": "array",
    "dict": "array",
    "none": "null",
}


def normalize_type_name(name: str) -> str:
    """Map an expected type name onto the names produced by :func:`type_name_of`.

    Example:
        >>> normalize_type_name("str")
        'string'
        >>> normalize_type_name("integer")
        'int'
    """
    name = name.strip().lower()
    return _TYPE_ALIASES.get(name, name)


def type_name_of(value: Any) -> str:
    """Name the runtime type of a configuration value.

    One of ``bool``, ``int``, ``float``, ``string``, ``array`` (lists, tuples and
    mappings, as loaded from JSON or YAML), ``object`` or ``null``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple, Mapping)):
        return "array"
    return "object"


class TypeValidator(Validator):
    """Checks the value's type against ``context["expected_type"]``."""

    def supports(self, rule: str) -> bool:
        return rule == "type"

    def validate(self, value: Any, context: dict[str, Any]) -> None:
        expected_type = context.get("expected_type")
        if not expected_type:
            raise ValidationError(
                "Expected type not specified in validation context",
                {**context, "rule": "type"},
            )

        expected = normalize_type_name(expected_type)
        actual = type_name_of(value)
        if actual != expected:
            raise ValidationError(
                f"Expected type '{expected}', got '{actual}'",
                {
                    **context,
                    "expected_type": expected,
                    "actual_type": actual,
                    "value": value,
                    "rule": "type",
                },
            )


class RangeValidator(Validator):
    """Checks a numeric value lies within ``context["min"]`` and ``context["max"]``.

    Numeric strings such as ``"8080"`` are compared by their value, in the
    value and in the bounds alike. Missing bounds leave that side of the range
    open; a bound that is not numeric fails validation.
    """

    def supports(self, rule: str) -> bool:
        return rule == "range"

    def validate(self, value: Any, context: dict[str, Any]) -> None:
        number = _as_number(value)
        if number is None:
            raise ValidationError(
                "Value must be numeric for range validation", {**context, "rule": "range"}
            )

        minimum = _as_number(context.get("min", -math.inf))
        maximum = _as_number(context.get("max", math.inf))
        if minimum is None or maximum is None:
            raise ValidationError(
                "Range bounds must be numeric", {**context, "rule": "range"}
            )

        if number < minimum or number > maximum:
            raise ValidationError(
                f"Value must be between {minimum} and {maximum}, {value} given",
                {**context, "rule": "range"},
            )


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            number = float(value)
        except ValueError:
            return None
        return None if math.isnan(number) else number
    return None


_DELIMITED = re.compile(r"^([/#~!@%|])(.*)\1([imsx]*)$", re.DOTALL)
_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL, "x": re.VERBOSE}


def compile_pattern(pattern: str) -> re.Pattern:
    """Compile a plain or delimiter-wrapped pattern such as ``/^[a-z]+$/i``."""
    match = _DELIMITED.match(pattern)
    if not match:
        return re.compile(pattern)

    _, body, modifiers = match.groups()
    flags = 0
    for modifier in modifiers:
        flags |= _FLAGS[modifier]
    return re.compile(body, flags)


class RegexValidator(Validator):
    """Checks the value's string form matches ``context["pattern"]``."""

    def supports(self, rule: str) -> bool:
        return rule == "regex"

    def validate(self, value: Any, context: dict[str, Any]) -> None:
        pattern = context.get("pattern")
        if pattern is None:
            raise ValidationError(
                "Regex pattern is required for regex validation",
                {**context, "rule": "regex"},
            )

        try:
            compiled = compile_pattern(pattern)
        except re.error as e:
            raise ValidationError(
                f"Invalid regex pattern: {e}", {**context, "rule": "regex"}
            ) from e

        if not compiled.search(str(value)):
            raise ValidationError(
                "Value does not match the required regex pattern",
                {**context, "rule": "regex"},
            )


class ValidatorRegistry:
    """Ordered collection of validators; the first supporting a rule handles it."""

    def __init__(self, validators: Optional[list[Validator]] = None):
        self._validators: list[Validator] = list(validators or [])

    @classmethod
    def default(cls) -> "ValidatorRegistry":
        """A new registry holding the built-in required, type, range and regex validators."""
        return cls([RequiredValidator(), TypeValidator(), RangeValidator(), RegexValidator()])

    def register(self, validator: Validator) -> None:
        self._validators.append(validator)

    def validator_for(self, rule: str) -> Optional[Validator]:
        return next((v for v in self._validators if v.supports(rule)), None)

    def supports(self, rule: str) -> bool:
        return self.validator_for(rule) is not None

    def validate(self, rule: str, value: Any, context: dict[str, Any]) -> None:
        """Validate ``value`` with the validator handling ``rule``.

        Raises:
            ValidatorNotFoundError: If no registered validator supports ``rule``.
            ValidationError: If the value breaks the rule.
        """
        validator = self.validator_for(rule)
        if validator is None:
            raise ValidatorNotFoundError(rule, {"config_key": context.get("config_key")})
        validator.validate(value, context)
