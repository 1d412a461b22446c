"""Parsing of validation rule strings.

A rule string is ``name`` or ``name:param``. Only the first ``:`` separates
the name, so ``regex:^a:b$`` has the pattern ``^a:b$``. Built-in rules turn
their parameter into validation context:

========================  ====================================
Rule string               Context
========================  ====================================
``type:int``              ``{"expected_type": "int"}``
``range:1-65535``         ``{"min": 1, "max": 65535}``
``range:-0.5-0.5``        ``{"min": -0.5, "max": 0.5}``
``regex:/^\\d+$/``        ``{"pattern": "/^\\d+$/"}``
``required``              ``{}``
========================  ====================================
"""

import re
from typing import Any, Union

from tessera.domain import Rule

__all__ = ["parse_rule", "parse_rules"]

_NUMBER = r"-?\d+(?:\.\d+)?"
_RANGE = re.compile(rf"^\s*({_NUMBER})\s*-\s*({_NUMBER})\s*$")


def parse_rule(rule: Union[str, Rule]) -> Rule:
    if isinstance(rule, Rule):
        return rule

    name, separator, param = rule.partition(":")
    params = _parse_params(name, param) if separator else {}
    return Rule(name, params, rule)


def parse_rules(rules: list[Union[str, Rule]]) -> list[Rule]:
    return [parse_rule(rule) for rule in rules]


def _parse_params(name: str, param: str) -> dict[str, Any]:
    if name == "type":
        return {"expected_type": param}
    if name == "range":
        match = _RANGE.match(param)
        if not match:
            return {}
        return {"min": _number(match.group(1)), "max": _number(match.group(2))}
    if name == "regex":
        return {"pattern": param}
    return {}


def _number(text: str) -> Union[int, float]:
    return float(text) if "." in text else int(text)
