"""metricparse: extract metrics embedded in field and tag values."""

from metricparse.adapters import (
    InfluxParser,
    JSONParser,
    LogCaptureHandler,
    LogfmtParser,
    ParserRegistry,
    ProcessorConfig,
    ValueParser,
    build_processor,
    default_registry,
    load_config,
    load_config_file,
)
from metricparse.core import (
    ConfigurationError,
    DeliveryInfo,
    LogEntry,
    MergePolicy,
    Metric,
    MetricParseError,
    ParseError,
    ParserProcessor,
    SubParser,
    with_tracking,
)

__all__ = [
    "ConfigurationError",
    "DeliveryInfo",
    "InfluxParser",
    "JSONParser",
    "LogCaptureHandler",
    "LogEntry",
    "LogfmtParser",
    "MergePolicy",
    "Metric",
    "MetricParseError",
    "ParseError",
    "ParserProcessor",
    "ParserRegistry",
    "ProcessorConfig",
    "SubParser",
    "ValueParser",
    "build_processor",
    "default_registry",
    "load_config",
    "load_config_file",
    "with_tracking",
]
