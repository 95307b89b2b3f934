"""Configuration loading for the parser processor.

Reads a plain mapping or a TOML file such as::

    [processors.parser]
    parse_fields = ["message"]
    drop_original = true
    merge = "override"
    data_format = "json"

    [processors.parser.parser_options]
    tag_keys = ["level"]
"""

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from metricparse.adapters.registry import ParserRegistry, default_registry
from metricparse.core.errors import ConfigurationError
from metricparse.core.processor import ParserProcessor

_LIST_KEYS = ("parse_fields", "parse_tags", "base64_fields")


@dataclass
class ProcessorConfig:
    """Settings for one parser processor instance."""

    parse_fields: list[str] = field(default_factory=list)
    parse_tags: list[str] = field(default_factory=list)
    base64_fields: list[str] = field(default_factory=list)
    drop_original: bool = False
    merge: str = ""
    data_format: str = "json"
    parser_options: dict[str, Any] = field(default_factory=dict)


def _string_list(key: str, value: Any) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigurationError(f"{key} must be a list of strings")
    return list(value)


def load_config(data: Mapping[str, Any]) -> ProcessorConfig:
    """Build a ProcessorConfig from a mapping.

    Raises:
        ConfigurationError: On unknown keys or wrongly typed values.
    """
    known = {f.name for f in fields(ProcessorConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigurationError(f"unknown configuration keys: {', '.join(unknown)}")

    config = ProcessorConfig()
    for key in _LIST_KEYS:
        if key in data:
            setattr(config, key, _string_list(key, data[key]))

    if "drop_original" in data:
        if not isinstance(data["drop_original"], bool):
            raise ConfigurationError("drop_original must be a boolean")
        config.drop_original = data["drop_original"]

    for key in ("merge", "data_format"):
        if key in data:
            if not isinstance(data[key], str):
                raise ConfigurationError(f"{key} must be a string")
            setattr(config, key, data[key])

    if "parser_options" in data:
        if not isinstance(data["parser_options"], Mapping):
            raise ConfigurationError("parser_options must be a table")
        config.parser_options = dict(data["parser_options"])

    return config


def load_config_file(path: str | Path) -> ProcessorConfig:
    """Load a ProcessorConfig from a TOML file.

    Uses the [processors.parser] table when the file has a [processors]
    table, the root table otherwise.

    Raises:
        ConfigurationError: If the file cannot be read or is invalid.
    """
    try:
        with open(path, "rb") as f:
            document = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(f"cannot load configuration from {path}: {exc}") from exc

    if "processors" not in document:
        return load_config(document)
    processors = document["processors"]
    if not isinstance(processors, dict) or not isinstance(processors.get("parser"), dict):
        raise ConfigurationError(
            f"{path} has a [processors] table but no [processors.parser] table"
        )
    return load_config(processors["parser"])


def build_processor(
    config: ProcessorConfig,
    registry: ParserRegistry | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> ParserProcessor:
    """Create and initialize a processor for the given configuration.

    Raises:
        ConfigurationError: If the sub-parser or the processor settings
            are invalid.
    """
    registry = registry or default_registry()
    parser = registry.create(config.data_format, **config.parser_options)
    processor = ParserProcessor(
        parser,
        parse_fields=config.parse_fields,
        parse_tags=config.parse_tags,
        base64_fields=config.base64_fields,
        drop_original=config.drop_original,
        merge=config.merge,
        logger=logger,
    )
    processor.init()
    return processor
