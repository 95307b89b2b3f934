"""JSON sub-parser.

Objects become one metric each, top-level arrays one metric per element.
Nested objects and arrays are flattened into underscore-joined keys.
"""

import json
import re
import time
from datetime import UTC, datetime
from typing import Any

from metricparse.core.errors import ConfigurationError, ParseError
from metricparse.core.models import FieldValue, Metric

_UNIX_DIVISORS = {"unix": 1, "unix_ms": 1e3, "unix_us": 1e6, "unix_ns": 1e9}

# Go reference-time layout tokens and their strptime equivalents
_LAYOUT_TOKENS = {
    "January": "%B",
    "Monday": "%A",
    "Z07:00": "%z",
    "-07:00": "%z",
    "-0700": "%z",
    ".000000": ".%f",
    ".000": ".%f",
    "2006": "%Y",
    "Jan": "%b",
    "Mon": "%a",
    "MST": "%Z",
    "01": "%m",
    "02": "%d",
    "15": "%H",
    "03": "%I",
    "04": "%M",
    "05": "%S",
    "PM": "%p",
}
_LAYOUT_PATTERN = re.compile("|".join(re.escape(token) for token in _LAYOUT_TOKENS))


def layout_to_strptime(layout: str) -> str:
    """Translate a reference-time layout (2006-01-02 15:04:05) to strptime.

    Layouts that already contain a % directive are returned unchanged.
    """
    if "%" in layout:
        return layout
    return _LAYOUT_PATTERN.sub(lambda m: _LAYOUT_TOKENS[m.group(0)], layout)


def parse_timestamp(value: Any, time_format: str) -> float:
    """Convert a raw JSON value to a Unix timestamp in seconds.

    Raises:
        ParseError: If the value does not match the format.
    """
    divisor = _UNIX_DIVISORS.get(time_format)
    if divisor is not None:
        try:
            return float(value) / divisor
        except (TypeError, ValueError):
            raise ParseError(f"invalid {time_format} timestamp", str(value)) from None

    if not isinstance(value, str):
        raise ParseError("timestamp must be a string", str(value))
    try:
        parsed = datetime.strptime(value, layout_to_strptime(time_format))
    except ValueError:
        raise ParseError(f"timestamp does not match {time_format!r}", value) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.timestamp()


def _flatten(value: Any, prefix: str, out: dict[str, Any]) -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            _flatten(item, f"{prefix}_{key}" if prefix else str(key), out)
    elif isinstance(value, list):
        for index, item in enumerate(value):
            _flatten(item, f"{prefix}_{index}" if prefix else str(index), out)
    elif value is not None:
        out[prefix] = value


class JSONParser:
    """Parse JSON documents into metrics.

    Numbers become float fields and booleans bool fields. Strings are only
    kept when listed in tag_keys (as tags) or string_fields (as fields).

    Args:
        tag_keys: Flattened keys whose values become tags.
        string_fields: Flattened keys whose string values become fields.
        name_key: Key whose string value becomes the measurement name.
        time_key: Key holding the timestamp.
        time_format: unix, unix_ms, unix_us, unix_ns, a reference-time
            layout such as "2006-01-02 15:04:05", or a strptime pattern.
        metric_name: Name used when neither name_key nor a default name
            applies.
    """

    def __init__(
        self,
        tag_keys: list[str] | None = None,
        string_fields: list[str] | None = None,
        name_key: str = "",
        time_key: str = "",
        time_format: str = "",
        metric_name: str = "json",
    ) -> None:
        self.tag_keys = set(tag_keys or [])
        self.string_fields = set(string_fields or [])
        self.name_key = name_key
        self.time_key = time_key
        self.time_format = time_format
        self.metric_name = metric_name

    def init(self) -> None:
        if self.time_key and not self.time_format:
            raise ConfigurationError("time_format is required when time_key is set")

    def parse(self, data: str | bytes, default_name: str | None = None) -> list[Metric]:
        try:
            document = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ParseError("invalid JSON", data) from None

        if isinstance(document, dict):
            return [self._to_metric(document, default_name)]
        if isinstance(document, list):
            metrics = []
            for item in document:
                if not isinstance(item, dict):
                    raise ParseError("array elements must be objects", data)
                metrics.append(self._to_metric(item, default_name))
            return metrics
        raise ParseError("expected a JSON object or array", data)

    def _to_metric(self, document: dict[str, Any], default_name: str | None) -> Metric:
        flat: dict[str, Any] = {}
        _flatten(document, "", flat)

        name = default_name or self.metric_name
        if self.name_key and isinstance(flat.get(self.name_key), str):
            name = flat.pop(self.name_key)

        timestamp = time.time()
        if self.time_key:
            if self.time_key not in flat:
                raise ParseError(f"time key {self.time_key!r} not found")
            timestamp = parse_timestamp(flat.pop(self.time_key), self.time_format)

        tags: dict[str, str] = {}
        fields: dict[str, FieldValue] = {}
        for key, value in flat.items():
            if key in self.tag_keys:
                tags[key] = value if isinstance(value, str) else json.dumps(value)
            elif isinstance(value, bool):
                fields[key] = value
            elif isinstance(value, (int, float)):
                fields[key] = float(value)
            elif key in self.string_fields:
                fields[key] = value
        return Metric(name=name, tags=tags, fields=fields, timestamp=timestamp)
