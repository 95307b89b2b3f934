"""Port interfaces for sub-parsers.

These protocols define the contracts that payload parsers must implement.
The processor depends only on these interfaces, not concrete implementations.
"""

from typing import Protocol, runtime_checkable

from metricparse.core.models import Metric


@runtime_checkable
class SubParser(Protocol):
    """Port for payload parsers.

    Adapters implementing this protocol turn a string or byte payload into
    zero or more metrics.
    Examples: JSONParser, LogfmtParser, ValueParser, InfluxParser.
    """

    def parse(self, data: str | bytes, default_name: str | None = None) -> list[Metric]:
        """Parse a payload into metrics.

        Args:
            data: Raw payload taken from a field or tag value.
            default_name: Measurement name to use when the payload does not
                carry one.

        Returns:
            Parsed metrics in payload order. May be empty.

        Raises:
            ParseError: If the payload is malformed.
        """
        ...


@runtime_checkable
class Initializer(Protocol):
    """Port for components with a one-time initialization step."""

    def init(self) -> None:
        """Validate settings and prepare internal state."""
        ...
