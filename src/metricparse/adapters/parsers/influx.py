"""InfluxDB line protocol sub-parser.

Each line has the form::

    measurement[,tag=value...] field=value[,field=value...] [timestamp]

with the timestamp in nanoseconds. The measurement name always comes from
the payload.
"""

import time

from metricparse.adapters.parsers.numbers import to_float, to_int
from metricparse.core.errors import ParseError
from metricparse.core.models import FieldValue, Metric

_TRUE = ("t", "T", "true", "True", "TRUE")
_FALSE = ("f", "F", "false", "False", "FALSE")


def split_unescaped(text: str, sep: str, quotes: bool = False, limit: int = -1) -> list[str]:
    """Split on sep, honouring backslash escapes and, optionally, quotes.

    Escapes are kept in the returned parts.
    """
    parts: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(text):
        char = text[i]
        if char == "\\" and i + 1 < len(text):
            current.append(text[i : i + 2])
            i += 2
            continue
        if quotes and char == '"':
            in_quotes = not in_quotes
        elif char == sep and not in_quotes and (limit < 0 or len(parts) < limit):
            parts.append("".join(current))
            current = []
            i += 1
            continue
        current.append(char)
        i += 1
    if in_quotes:
        raise ParseError("unterminated string", text)
    parts.append("".join(current))
    return parts


def unescape(text: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(text):
        if text[i] == "\\" and i + 1 < len(text) and text[i + 1] in ' ,="\\':
            out.append(text[i + 1])
            i += 2
            continue
        out.append(text[i])
        i += 1
    return "".join(out)


def parse_field_value(raw: str) -> FieldValue:
    """Convert a line protocol field value.

    Raises:
        ParseError: If the value is not a valid literal.
    """
    if len(raw) >= 2 and raw[0] == '"' and raw[-1] == '"':
        return unescape(raw[1:-1])
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    try:
        if raw.endswith("i") or raw.endswith("u"):
            value = to_int(raw[:-1])
            if raw.endswith("u") and value < 0:
                raise ValueError(raw)
            return value
        return to_float(raw)
    except ValueError:
        raise ParseError("invalid field value", raw) from None


class InfluxParser:
    """Parse InfluxDB line protocol."""

    def parse(self, data: str | bytes, default_name: str | None = None) -> list[Metric]:
        if isinstance(data, bytes):
            try:
                data = data.decode()
            except UnicodeDecodeError:
                raise ParseError("line protocol is not valid UTF-8", data) from None
        return [
            self._parse_line(line)
            for line in data.splitlines()
            if line.strip() and not line.lstrip().startswith("#")
        ]

    def _parse_line(self, line: str) -> Metric:
        sections = [s for s in split_unescaped(line.strip(), " ", quotes=True) if s]
        if len(sections) < 2 or len(sections) > 3:
            raise ParseError("expected measurement, fields and optional timestamp", line)

        series = split_unescaped(sections[0], ",")
        name = unescape(series[0])
        if not name:
            raise ParseError("missing measurement name", line)

        tags: dict[str, str] = {}
        for pair in series[1:]:
            key, sep, value = self._split_pair(pair)
            if not sep or not key or not value:
                raise ParseError("invalid tag", pair)
            tags[key] = unescape(value)

        fields: dict[str, FieldValue] = {}
        for pair in split_unescaped(sections[1], ",", quotes=True):
            key, sep, value = self._split_pair(pair)
            if not sep or not key or not value:
                raise ParseError("invalid field", pair)
            fields[key] = parse_field_value(value)

        timestamp = time.time()
        if len(sections) == 3:
            try:
                timestamp = to_int(sections[2]) / 1e9
            except ValueError:
                raise ParseError("invalid timestamp", sections[2]) from None

        return Metric(name=name, tags=tags, fields=fields, timestamp=timestamp)

    @staticmethod
    def _split_pair(pair: str) -> tuple[str, bool, str]:
        parts = split_unescaped(pair, "=", limit=1)
        if len(parts) != 2:
            return unescape(pair), False, ""
        return unescape(parts[0]), True, parts[1]
