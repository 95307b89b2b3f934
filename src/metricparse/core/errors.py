"""Exceptions raised by processors and sub-parsers."""


class MetricParseError(Exception):
    """Base class for all metricparse errors."""


class ConfigurationError(MetricParseError):
    """Raised at initialization time for unusable configuration."""


class ParseError(MetricParseError):
    """Raised by a sub-parser when a payload is malformed.

    Args:
        message: Description of what went wrong.
        payload: The offending input; only a short excerpt is kept.
    """

    _EXCERPT_LENGTH = 64

    def __init__(self, message: str, payload: str | bytes | None = None) -> None:
        self.payload = None
        if payload is not None:
            self.payload = payload[: self._EXCERPT_LENGTH]
            message = f"{message}: {self.payload!r}"
        super().__init__(message)
