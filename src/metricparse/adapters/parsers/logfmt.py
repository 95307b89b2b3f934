"""logfmt sub-parser (key=value pairs, one record per line)."""

import re
import time

from metricparse.adapters.parsers.numbers import to_float, to_int
from metricparse.core.errors import ParseError
from metricparse.core.models import FieldValue, Metric

_PAIR = re.compile(r'([^\s="]+)=("(?:[^"\\]|\\.)*"|[^\s"]*)')
_ESCAPE = re.compile(r"\\(.)")


def convert_value(raw: str) -> FieldValue:
    """Convert a logfmt value to int, float or bool where possible."""
    if raw.startswith('"') and raw.endswith('"') and len(raw) >= 2:
        return _ESCAPE.sub(r"\1", raw[1:-1])
    for cast in (to_int, to_float):
        try:
            return cast(raw)
        except ValueError:
            pass
    if raw.lower() in ("true", "false"):
        return raw.lower() == "true"
    return raw


class LogfmtParser:
    """Parse logfmt lines into metrics.

    Args:
        tag_keys: Keys whose values become tags instead of fields.
        metric_name: Name used when no default name is given.
    """

    def __init__(self, tag_keys: list[str] | None = None, metric_name: str = "logfmt") -> None:
        self.tag_keys = set(tag_keys or [])
        self.metric_name = metric_name

    def parse(self, data: str | bytes, default_name: str | None = None) -> list[Metric]:
        if isinstance(data, bytes):
            try:
                data = data.decode()
            except UnicodeDecodeError:
                raise ParseError("logfmt payload is not valid UTF-8", data) from None

        metrics = []
        for line in data.splitlines():
            if not line.strip():
                continue
            pairs = _PAIR.findall(line)
            if not pairs:
                raise ParseError("no key=value pairs found", line)
            tags: dict[str, str] = {}
            fields: dict[str, FieldValue] = {}
            for key, raw in pairs:
                value = convert_value(raw)
                if key in self.tag_keys:
                    tags[key] = str(value) if not isinstance(value, str) else value
                else:
                    fields[key] = value
            metrics.append(
                Metric(
                    name=default_name or self.metric_name,
                    tags=tags,
                    fields=fields,
                    timestamp=time.time(),
                )
            )
        return metrics
