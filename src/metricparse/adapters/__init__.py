"""Adapters: bundled sub-parsers, registry, configuration and logging."""

from metricparse.adapters.config import (
    ProcessorConfig,
    build_processor,
    load_config,
    load_config_file,
)
from metricparse.adapters.logging import LogCaptureHandler
from metricparse.adapters.parsers import InfluxParser, JSONParser, LogfmtParser, ValueParser
from metricparse.adapters.registry import ParserRegistry, default_registry

__all__ = [
    "InfluxParser",
    "JSONParser",
    "LogCaptureHandler",
    "LogfmtParser",
    "ParserRegistry",
    "ProcessorConfig",
    "ValueParser",
    "build_processor",
    "default_registry",
    "load_config",
    "load_config_file",
]
