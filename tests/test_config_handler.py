from typing import Any

import pytest

from tessera.config.handler import ConfigHandler
from tessera.config.validators import Validator, ValidatorRegistry
from tessera.domain import Rule
from tessera.errors import (
    ConfigNotFoundError,
    ConfigValidationError,
    ValidationError,
    ValidatorNotFoundError,
)


class EvenValidator(Validator):
    def supports(self, rule: str) -> bool:
        return rule == "even"

    def validate(self, value: Any, context: dict[str, Any]) -> None:
        if value % 2:
            raise ValidationError("Value must be even", context)


@pytest.fixture
def config():
    return ConfigHandler()


def test_value_without_rules_is_accepted(config):
    config.set("k", object)

    assert config.has("k")
    assert config.get("k") is object


def test_missing_key_raises(config):
    with pytest.raises(ConfigNotFoundError, match='"app.name" was not found'):
        config.get("app.name")

    assert not config.has("app.name")


def test_value_passing_all_rules_is_stored(config):
    config.set_validation_rules({"app.port": ["required", "type:int", "range:1-65535"]})

    config.set("app.port", 8080)

    assert config.get("app.port") == 8080


def test_rejected_value_is_not_stored(config):
    config.set_validation_rules({"app.port": ["range"]})

    with pytest.raises(ConfigValidationError, match='validation failed for key "app.port"'):
        config.set("app.port", 70000, {"min": 1, "max": 65535})

    assert not config.has("app.port")
    with pytest.raises(ConfigNotFoundError):
        config.get("app.port")


def test_rejected_value_keeps_previous_value(config):
    config.set_validation_rules({"app.port": ["range:1-65535"]})
    config.set("app.port", 443)

    with pytest.raises(ConfigValidationError):
        config.set("app.port", 0)

    assert config.get("app.port") == 443


def test_errors_from_all_rules_are_aggregated(config):
    config.set_validation_rules({"app.name": ["required", "type:string", "regex:/^[a-z]+$/"]})

    with pytest.raises(ConfigValidationError) as e:
        config.set("app.name", "")

    assert e.value.errors == [
        "Value is required and cannot be empty",
        "Value does not match the required regex pattern",
    ]
    assert e.value.context["rules"] == ["required", "type:string", "regex:/^[a-z]+$/"]
    assert e.value.context["value"] == ""
    assert e.value.context["key"] == "app.name"


def test_rule_parameters_override_context(config):
    config.set_validation_rules({"workers": ["range:1-4"]})

    with pytest.raises(ConfigValidationError):
        config.set("workers", 8, {"min": 1, "max": 16})


def test_string_bounds_from_context_are_enforced(config):
    config.set_validation_rules({"port": ["range"]})

    with pytest.raises(ConfigValidationError, match='validation failed for key "port"'):
        config.set("port", 70000, {"min": "1", "max": "65535"})

    config.set("port", 8080, {"min": "1", "max": "65535"})
    assert config.get("port") == 8080


def test_context_is_passed_to_validators(config):
    seen = []

    class RecordingValidator(Validator):
        def supports(self, rule):
            return rule == "record"

        def validate(self, value, context):
            seen.append(context)

    config.register_validator(RecordingValidator())
    config.set_validation_rules({"debug": ["record"]})
    config.set("debug", True, {"environment": "test"})

    assert seen == [{"environment": "test", "config_key": "debug"}]


def test_unknown_rule_raises(config):
    config.set_validation_rules({"app.mode": ["one_of:dev,prod"]})

    with pytest.raises(ValidatorNotFoundError, match='rule "one_of"'):
        config.set("app.mode", "dev")

    assert not config.has("app.mode")


def test_custom_validator_can_be_registered(config):
    config.register_validator(EvenValidator())
    config.set_validation_rules({"replicas": ["even"]})

    config.set("replicas", 4)
    with pytest.raises(ConfigValidationError) as e:
        config.set("replicas", 3)

    assert e.value.errors == ["Value must be even"]
    assert config.get("replicas") == 4


def test_first_supporting_validator_wins():
    class LenientRange(Validator):
        def supports(self, rule):
            return rule == "range"

        def validate(self, value, context):
            pass

    config = ConfigHandler(ValidatorRegistry([LenientRange()]))
    config.register_validator(EvenValidator())
    config.set_validation_rules({"port": ["range:1-10"]})

    config.set("port", 99)

    assert config.get("port") == 99


def test_each_handler_owns_its_registry():
    first, second = ConfigHandler(), ConfigHandler()
    first.register_validator(EvenValidator())
    first.set_validation_rules({"n": ["even"]})
    second.set_validation_rules({"n": ["even"]})

    first.set("n", 2)
    with pytest.raises(ValidatorNotFoundError):
        second.set("n", 2)


def test_rules_are_parsed_once(config):
    config.set_validation_rules({"app.port": ["type:int", "range:1-65535"]})

    assert config.rules_for("app.port") == [
        Rule("type", {"expected_type": "int"}, "type:int"),
        Rule("range", {"min": 1, "max": 65535}, "range:1-65535"),
    ]
    assert config.rules_for("unknown") == []


def test_configure_sets_every_value(config):
    config.set_validation_rules({"app.port": ["type:int"]})

    config.configure({"app.name": "Dino", "app.port": 8080})

    assert config.all() == {"app.name": "Dino", "app.port": 8080}


def test_configure_stops_at_first_rejection(config):
    config.set_validation_rules({"app.port": ["type:int"]})

    with pytest.raises(ConfigValidationError):
        config.configure({"app.name": "Dino", "app.port": "8080", "app.debug": True})

    assert config.all() == {"app.name": "Dino"}


def test_all_returns_a_copy(config):
    config.set("a", 1)
    config.all()["b"] = 2

    assert not config.has("b")
