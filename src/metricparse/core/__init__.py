"""Core domain: metrics, delivery tracking, merge policies and the processor."""

from metricparse.core.errors import ConfigurationError, MetricParseError, ParseError
from metricparse.core.merge import MergePolicy, merge, merge_all
from metricparse.core.models import FieldValue, LogEntry, Metric
from metricparse.core.ports import Initializer, SubParser
from metricparse.core.processor import ParserProcessor
from metricparse.core.tracking import (
    DeliveryHandle,
    DeliveryInfo,
    TrackingGroup,
    redistribute,
    with_tracking,
)

__all__ = [
    "ConfigurationError",
    "DeliveryHandle",
    "DeliveryInfo",
    "FieldValue",
    "Initializer",
    "LogEntry",
    "MergePolicy",
    "Metric",
    "MetricParseError",
    "ParseError",
    "ParserProcessor",
    "SubParser",
    "TrackingGroup",
    "merge",
    "merge_all",
    "redistribute",
    "with_tracking",
]
