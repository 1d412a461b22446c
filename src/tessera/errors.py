"""Exception hierarchy shared by the container, the resolver and the config layer.

Every error carries a machine-readable :class:`ErrorCode`, a human readable
message and a free-form context dictionary for diagnostics. Errors are never
retried by the library; they always surface to the caller.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

__all__ = [
    "ErrorCode",
    "TesseraError",
    "DependencyError",
    "ServiceNotFoundError",
    "CircularDependencyError",
    "ServiceResolutionError",
    "InterfaceNotBoundError",
    "UnresolvableParameterError",
    "ConfigurationError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "ConfigParserError",
    "ValidationError",
    "ValidatorNotFoundError",
    "format_validation_errors",
]


class ErrorCode(str, Enum):
    SERVICE_NOT_FOUND = "SERVICE_100"
    SERVICE_CIRCULAR_DEPENDENCY = "SERVICE_101"
    SERVICE_RESOLUTION_FAILED = "SERVICE_102"

    CONFIG_VALIDATION_FAILED = "CONFIG_200"
    CONFIG_KEY_NOT_FOUND = "CONFIG_201"
    CONFIG_PARSER_ERROR = "CONFIG_202"

    DI_UNRESOLVABLE_PARAMETER = "DI_300"
    DI_INTERFACE_NOT_BOUND = "DI_302"

    VALIDATION_FAILED = "VALIDATION_400"
    VALIDATOR_NOT_FOUND = "VALIDATION_401"

    @property
    def category(self) -> str:
        return self.value.split("_")[0]

    @property
    def severity(self) -> str:
        return _SEVERITIES.get(self, "ERROR")


_SEVERITIES = {
    ErrorCode.SERVICE_CIRCULAR_DEPENDENCY: "CRITICAL",
    ErrorCode.DI_UNRESOLVABLE_PARAMETER: "HIGH",
    ErrorCode.CONFIG_VALIDATION_FAILED: "HIGH",
    ErrorCode.SERVICE_RESOLUTION_FAILED: "MEDIUM",
    ErrorCode.CONFIG_KEY_NOT_FOUND: "MEDIUM",
    ErrorCode.VALIDATION_FAILED: "MEDIUM",
}


class TesseraError(Exception):
    """Base class for all library errors.

    Attributes:
        code: The :class:`ErrorCode` identifying the failure.
        message: Human readable description.
        context: Diagnostic values describing the failure.
    """

    code: ErrorCode

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})

    # KeyError subclasses would otherwise render the message as a quoted key
    def __str__(self) -> str:
        return self.message

    @property
    def severity(self) -> str:
        return self.code.severity

    @property
    def formatted_message(self) -> str:
        """The message prefixed with its code, followed by the JSON encoded context."""
        context = (
            f" [Context: {json.dumps(self.context, default=repr)}]"
            if self.context
            else ""
        )
        return f"[{self.code.value}] {self.message}{context}"

    def details(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "severity": self.severity,
            "context": self.context,
            "category": self.code.category,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


class DependencyError(TesseraError):
    """Raised when a service cannot be located, constructed or wired."""


class ServiceNotFoundError(DependencyError, KeyError):
    code = ErrorCode.SERVICE_NOT_FOUND

    def __init__(self, service: Any, context: Optional[dict[str, Any]] = None):
        super().__init__(
            f'Service "{_key_name(service)}" was not found in the container.',
            {"service": _key_name(service), **(context or {})},
        )


class CircularDependencyError(DependencyError):
    code = ErrorCode.SERVICE_CIRCULAR_DEPENDENCY

    def __init__(self, service: Any, context: Optional[dict[str, Any]] = None):
        super().__init__(
            f'Circular dependency detected for service "{_key_name(service)}".',
            {"service": _key_name(service), **(context or {})},
        )


class ServiceResolutionError(DependencyError):
    code = ErrorCode.SERVICE_RESOLUTION_FAILED

    def __init__(self, service: Any, context: Optional[dict[str, Any]] = None):
        super().__init__(
            f'Service "{_key_name(service)}" could not be resolved.',
            {"service": _key_name(service), **(context or {})},
        )


class InterfaceNotBoundError(ServiceResolutionError):
    code = ErrorCode.DI_INTERFACE_NOT_BOUND

    def __init__(self, interface: Any, context: Optional[dict[str, Any]] = None):
        DependencyError.__init__(
            self,
            f'Interface "{_key_name(interface)}" is not bound to any implementation.',
            {"interface": _key_name(interface), **(context or {})},
        )


class UnresolvableParameterError(DependencyError):
    code = ErrorCode.DI_UNRESOLVABLE_PARAMETER

    def __init__(self, parameter: str, context: Optional[dict[str, Any]] = None):
        super().__init__(
            f'Parameter "{parameter}" could not be resolved.',
            {"parameter": parameter, **(context or {})},
        )


class ConfigurationError(TesseraError):
    """Raised for problems with configuration values, rules or files."""


class ConfigNotFoundError(ConfigurationError, KeyError):
    code = ErrorCode.CONFIG_KEY_NOT_FOUND

    def __init__(self, key: str, context: Optional[dict[str, Any]] = None):
        super().__init__(
            f'Configuration key "{key}" was not found.',
            {"key": key, **(context or {})},
        )


class ConfigValidationError(ConfigurationError):
    code = ErrorCode.CONFIG_VALIDATION_FAILED

    def __init__(self, key: str, context: Optional[dict[str, Any]] = None):
        super().__init__(
            f'Configuration validation failed for key "{key}".',
            {"key": key, **(context or {})},
        )

    @property
    def errors(self) -> list[str]:
        return self.context.get("errors", [])


class ConfigParserError(ConfigurationError):
    code = ErrorCode.CONFIG_PARSER_ERROR

    def __init__(self, source: str, context: Optional[dict[str, Any]] = None):
        super().__init__(
            f'Failed to parse configuration file "{source}".',
            {"file": source, **(context or {})},
        )


class ValidationError(ConfigurationError):
    """A single rule violation reported by a validator."""

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, reason: str, context: Optional[dict[str, Any]] = None):
        super().__init__(reason, {**(context or {}), "reason": reason})

    @property
    def reason(self) -> str:
        return self.message

    @property
    def config_key(self) -> Optional[str]:
        return self.context.get("config_key")

    @property
    def rule(self) -> Optional[str]:
        return self.context.get("rule")


class ValidatorNotFoundError(ConfigurationError):
    code = ErrorCode.VALIDATOR_NOT_FOUND

    def __init__(self, rule: str, context: Optional[dict[str, Any]] = None):
        super().__init__(
            f'No validator registered for rule "{rule}".',
            {"rule": rule, **(context or {})},
        )


def format_validation_errors(errors: dict[str, list[str]]) -> str:
    """Render per-key validation messages as a single line.

    Example:
        >>> format_validation_errors({"port": ["too big"], "host": ["required", "bad"]})
        'Validation failed: port: too big; host: required, bad'
    """
    formatted = [f"{field}: {', '.join(messages)}" for field, messages in errors.items()]
    return f"Validation failed: {'; '.join(formatted)}"


def _key_name(key: Any) -> str:
    if isinstance(key, type):
        return key.__qualname__
    return str(key)
