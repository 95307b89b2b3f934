"""Single-value sub-parser."""

import time

from metricparse.adapters.parsers.numbers import to_float, to_int
from metricparse.core.errors import ConfigurationError, ParseError
from metricparse.core.models import FieldValue, Metric

DATA_TYPES = ("integer", "float", "string", "boolean", "auto_integer", "auto_float")


def _to_bool(raw: str) -> bool:
    lowered = raw.lower()
    if lowered in ("true", "t", "1"):
        return True
    if lowered in ("false", "f", "0"):
        return False
    raise ValueError(f"invalid boolean {raw!r}")


class ValueParser:
    """Parse a payload holding a single scalar.

    Surrounding whitespace and NUL bytes are stripped. String payloads are
    kept whole; for other types, when several whitespace-separated values
    are present the last one is used.

    Args:
        data_type: One of integer, float, string, boolean, auto_integer,
            auto_float.
        field_name: Name of the field receiving the value.
        metric_name: Name used when no default name is given.
    """

    def __init__(
        self,
        data_type: str = "float",
        field_name: str = "value",
        metric_name: str = "value",
    ) -> None:
        self.data_type = data_type
        self.field_name = field_name
        self.metric_name = metric_name

    def init(self) -> None:
        if self.data_type not in DATA_TYPES:
            raise ConfigurationError(
                f"unknown data type {self.data_type!r}, expected one of {', '.join(DATA_TYPES)}"
            )

    def parse(self, data: str | bytes, default_name: str | None = None) -> list[Metric]:
        if isinstance(data, bytes):
            try:
                data = data.decode()
            except UnicodeDecodeError:
                raise ParseError("value payload is not valid UTF-8", data) from None
        raw = data.strip(" \t\r\n\x00")
        if not raw:
            raise ParseError("empty value")
        if self.data_type != "string":
            raw = raw.split()[-1]

        try:
            value = self._convert(raw)
        except ValueError:
            raise ParseError(f"cannot convert to {self.data_type}", raw) from None

        return [
            Metric(
                name=default_name or self.metric_name,
                fields={self.field_name: value},
                timestamp=time.time(),
            )
        ]

    def _convert(self, raw: str) -> FieldValue:
        if self.data_type == "integer":
            return to_int(raw)
        if self.data_type == "float":
            return to_float(raw)
        if self.data_type == "boolean":
            return _to_bool(raw)
        if self.data_type == "string":
            return raw

        casts = (to_int, to_float) if self.data_type == "auto_integer" else (to_float,)
        for cast in casts:
            try:
                return cast(raw)
            except ValueError:
                pass
        return raw
