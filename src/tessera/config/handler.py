"""Key/value configuration store with per-key validation rules."""

import logging
from typing import Any, Mapping, Optional, Union

from tessera.config.rules import parse_rules
from tessera.config.validators import Validator, ValidatorRegistry
from tessera.domain import Rule
from tessera.errors import ConfigNotFoundError, ConfigValidationError, ValidationError

__all__ = ["ConfigHandler"]

logger = logging.getLogger(__name__)


class ConfigHandler:
    """Stores configuration values, validating them against per-key rules.

    Keys without rules accept any value. Keys with rules only accept a value
    that passes every rule; a rejected value leaves the stored value untouched.

    Each handler owns its validator registry. By default it holds the built-in
    ``required``, ``type``, ``range`` and ``regex`` validators.

    Example:
        >>> config = ConfigHandler()
        >>> config.set_validation_rules({"app.port": ["required", "type:int", "range:1-65535"]})
        >>> config.set("app.port", 8080)
        >>> config.get("app.port")
        8080
    """

    def __init__(self, registry: Optional[ValidatorRegistry] = None):
        self._config: dict[str, Any] = {}
        self._validation_rules: dict[str, list[Rule]] = {}
        self._registry = registry if registry is not None else ValidatorRegistry.default()

    def set_validation_rules(self, rules: Mapping[str, list[Union[str, Rule]]]) -> None:
        """Replace all validation rules. Rule strings are parsed immediately."""
        self._validation_rules = {key: parse_rules(key_rules) for key, key_rules in rules.items()}

    def rules_for(self, key: str) -> list[Rule]:
        return list(self._validation_rules.get(key, []))

    def register_validator(self, validator: Validator) -> None:
        self._registry.register(validator)

    def set(self, key: str, value: Any, context: Optional[dict[str, Any]] = None) -> None:
        """Validate and store ``value`` under ``key``.

        Args:
            key: The configuration key.
            value: The value to store.
            context: Extra validation context, e.g. ``{"min": 1, "max": 10}``.
                Parameters given in a rule string take precedence over it.

        Raises:
            ValidatorNotFoundError: If a rule for ``key`` has no validator.
            ConfigValidationError: If the value breaks one or more rules. Its
                ``errors`` lists the reason for each.
        """
        self._validate(key, value, context or {})
        self._config[key] = value

    def get(self, key: str) -> Any:
        try:
            return self._config[key]
        except KeyError:
            raise ConfigNotFoundError(key, {"reason": "Configuration key not found"}) from None

    def has(self, key: str) -> bool:
        return key in self._config

    def all(self) -> dict[str, Any]:
        return dict(self._config)

    def configure(self, values: Mapping[str, Any], context: Optional[dict[str, Any]] = None) -> None:
        """Set several values in turn; stops at the first rejected value."""
        for key, value in values.items():
            self.set(key, value, context)

    def _validate(self, key: str, value: Any, context: dict[str, Any]) -> None:
        rules = self._validation_rules.get(key)
        if not rules:
            return

        errors = []
        for rule in rules:
            validation_context = {**context, **rule.params, "config_key": key}
            try:
                self._registry.validate(rule.name, value, validation_context)
            except ValidationError as e:
                errors.append(e.reason)

        if errors:
            logger.warning("Rejected value for config key %s: %s", key, "; ".join(errors))
            raise ConfigValidationError(
                key,
                {
                    **context,
                    "errors": errors,
                    "rules": [str(rule) for rule in rules],
                    "value": value,
                },
            )
