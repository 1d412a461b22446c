"""Loading of configuration files into mappings.

:class:`ConfigLoader` picks a parser by file extension. :class:`CachedConfigLoader`
wraps any loader with a cache keyed by the file path and its modification
time, so an edited file is re-read on the next load.
"""

import copy
import hashlib
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

from tessera.config.cache import Cache
from tessera.config.parsers import ConfigParser, JsonConfigParser, YamlConfigParser
from tessera.errors import ConfigNotFoundError, ConfigParserError
from tessera.events import EventDispatcher, LifecycleEvents

__all__ = ["BaseConfigLoader", "ConfigLoader", "CachedConfigLoader"]

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

_KNOWN_FORMATS = ("json", "yaml", "yml")


class BaseConfigLoader(ABC):
    @abstractmethod
    def load(self, path: PathLike) -> dict[str, Any]:
        ...


class ConfigLoader(BaseConfigLoader):
    """Reads configuration files, dispatching on the lower-cased file extension.

    JSON and YAML parsers are registered on construction. A parser added later
    replaces the current parser for every format it supports.
    """

    def __init__(self):
        self._parsers: dict[str, ConfigParser] = {}
        self.add_parser(JsonConfigParser())
        self.add_parser(YamlConfigParser())

    def add_parser(self, parser: ConfigParser) -> None:
        for extension in _KNOWN_FORMATS:
            if parser.supports(extension):
                self._parsers[extension] = parser

    def supported_formats(self) -> list[str]:
        return list(self._parsers)

    def load(self, path: PathLike) -> dict[str, Any]:
        """Parse the configuration file at ``path``.

        Raises:
            ConfigNotFoundError: If the file does not exist.
            ConfigParserError: If the format is unsupported, the file cannot be
                read, or its content is malformed.
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigNotFoundError(str(path), {"reason": "File does not exist"})

        extension = path.suffix.lstrip(".").lower()
        parser = self._parsers.get(extension)
        if parser is None:
            raise ConfigParserError(
                str(path), {"reason": f"Unsupported config format: {extension}"}
            )

        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigParserError(
                str(path), {"reason": "Unable to read config file", "error": str(e)}
            ) from e

        logger.debug("Parsing %s with %s", path, type(parser).__name__)
        return parser.parse(content, source=str(path))


class CachedConfigLoader(BaseConfigLoader):
    """Caches the mappings produced by another loader.

    Callers always receive their own copy of a cached mapping, so editing a
    loaded config never changes what later loads return.

    Args:
        loader: The loader to delegate to on a cache miss.
        cache: Where parsed mappings are kept.
        default_ttl: Seconds a parsed mapping stays cached.
        events: Optional dispatcher notified of loads and of cache hits,
            misses, writes and deletions. Payloads carry the ``path``.
    """

    def __init__(
        self,
        loader: BaseConfigLoader,
        cache: Cache,
        default_ttl: Optional[int] = 3600,
        events: Optional[EventDispatcher] = None,
    ):
        self._loader = loader
        self._cache = cache
        self._default_ttl = default_ttl
        self._events = events

    def load(self, path: PathLike) -> dict[str, Any]:
        cache_key = self._cache_key(path)
        self._dispatch(LifecycleEvents.BEFORE_CONFIG_LOAD, path)
        if self._cache.has(cache_key):
            logger.debug("Config cache hit for %s", path)
            self._dispatch(LifecycleEvents.CACHE_HIT, path)
            config = copy.deepcopy(self._cache.get(cache_key))
            self._dispatch(LifecycleEvents.AFTER_CONFIG_LOAD, path, cached=True)
            return config

        logger.debug("Config cache miss for %s", path)
        self._dispatch(LifecycleEvents.CACHE_MISS, path)
        config = self._loader.load(path)
        self._cache.set(cache_key, copy.deepcopy(config), self._default_ttl)
        self._dispatch(LifecycleEvents.CACHE_SET, path)
        self._dispatch(LifecycleEvents.AFTER_CONFIG_LOAD, path, cached=False)
        return config

    def invalidate(self, path: PathLike) -> None:
        """Drop the cached mapping for ``path``.

        The cache key includes the file's modification time, so the file must
        still exist; invalidating a deleted file raises ConfigNotFoundError.
        """
        self._cache.delete(self._cache_key(path))
        self._dispatch(LifecycleEvents.CACHE_DELETE, path)
        logger.debug("Invalidated cached config for %s", path)

    def _dispatch(self, event: str, path: PathLike, **payload: Any) -> None:
        if self._events is not None:
            self._events.dispatch(event, {"path": os.fspath(path), **payload})

    @staticmethod
    def _cache_key(path: PathLike) -> str:
        try:
            mtime = os.stat(path).st_mtime
        except FileNotFoundError:
            raise ConfigNotFoundError(str(path), {"reason": "File does not exist"}) from None

        digest = hashlib.md5(f"{os.fspath(path)}{mtime}".encode()).hexdigest()
        return f"config_{digest}"
