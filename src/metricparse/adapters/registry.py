"""Registry mapping data format names to sub-parser factories."""

from collections.abc import Callable
from typing import Any

from metricparse.adapters.parsers import InfluxParser, JSONParser, LogfmtParser, ValueParser
from metricparse.core.errors import ConfigurationError
from metricparse.core.ports import SubParser

ParserFactory = Callable[..., SubParser]


class ParserRegistry:
    """Look up sub-parser factories by data format name.

    Example:
        ```python
        registry = default_registry()
        parser = registry.create("json", tag_keys=["host"])
        ```
    """

    def __init__(self) -> None:
        self._factories: dict[str, ParserFactory] = {}

    def register(self, name: str, factory: ParserFactory) -> None:
        """Register a factory for a data format.

        Raises:
            TypeError: If factory is not callable.
            ValueError: If the name is already registered.
        """
        if not callable(factory):
            raise TypeError("factory must be callable")
        if name in self._factories:
            raise ValueError(f"data format {name!r} already registered")
        self._factories[name] = factory

    def lookup(self, name: str) -> ParserFactory | None:
        """Return the factory for a data format, or None if unknown."""
        return self._factories.get(name)

    def names(self) -> list[str]:
        return sorted(self._factories)

    def create(self, name: str, **options: Any) -> SubParser:
        """Instantiate the sub-parser for a data format.

        Raises:
            ConfigurationError: If the format is unknown or the options are
                not accepted by its factory.
        """
        factory = self.lookup(name)
        if factory is None:
            known = ", ".join(self.names()) or "none"
            raise ConfigurationError(f"unknown data format {name!r} (known: {known})")
        try:
            return factory(**options)
        except TypeError as exc:
            raise ConfigurationError(f"invalid options for data format {name!r}: {exc}") from exc


def default_registry() -> ParserRegistry:
    """Return a registry holding the bundled sub-parsers."""
    registry = ParserRegistry()
    registry.register("json", JSONParser)
    registry.register("logfmt", LogfmtParser)
    registry.register("value", ValueParser)
    registry.register("influx", InfluxParser)
    return registry
