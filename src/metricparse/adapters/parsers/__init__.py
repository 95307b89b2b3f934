"""Sub-parsers implementing the SubParser port."""

from metricparse.adapters.parsers.influx import InfluxParser
from metricparse.adapters.parsers.json_parser import JSONParser
from metricparse.adapters.parsers.logfmt import LogfmtParser
from metricparse.adapters.parsers.value import ValueParser

__all__ = [
    "InfluxParser",
    "JSONParser",
    "LogfmtParser",
    "ValueParser",
]
