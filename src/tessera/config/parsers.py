"""Format specific parsers turning configuration text into a mapping."""

import json
from abc import ABC, abstractmethod
from typing import Any

import yaml

from tessera.errors import ConfigParserError

__all__ = ["ConfigParser", "JsonConfigParser", "YamlConfigParser"]


class ConfigParser(ABC):
    formats: tuple[str, ...] = ()

    def supports(self, format: str) -> bool:
        return format.lower() in self.formats

    @abstractmethod
    def parse(self, content: str, source: str = "<string>") -> dict[str, Any]:
        """Parse ``content`` into a mapping.

        Args:
            content: The raw configuration text.
            source: Where the text came from, used in error context.

        Raises:
            ConfigParserError: If the text is malformed or not a mapping.
        """


class JsonConfigParser(ConfigParser):
    formats = ("json",)

    def parse(self, content: str, source: str = "<string>") -> dict[str, Any]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ConfigParserError(source, {"error": str(e)}) from e
        return _as_mapping(data, source)


class YamlConfigParser(ConfigParser):
    formats = ("yaml", "yml")

    def parse(self, content: str, source: str = "<string>") -> dict[str, Any]:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigParserError(source, {"error": str(e)}) from e
        return _as_mapping(data, source)


def _as_mapping(data: Any, source: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParserError(
            source,
            {"error": f"Top-level value must be a mapping, got {type(data).__name__}"},
        )
    return data
