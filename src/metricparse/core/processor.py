"""Processor extracting metrics embedded in field and tag values.

The payload format is left entirely to a pluggable sub-parser. The processor
decides which values to hand over, how parsed metrics combine with the
metric they came from, and whether that metric is still emitted.

Example:
    ```python
    from metricparse import JSONParser, ParserProcessor

    processor = ParserProcessor(
        JSONParser(tag_keys=["lvl"]),
        parse_fields=["message"],
        merge="override",
    )
    processor.init()
    outputs = processor.apply(metric)
    ```
"""

import base64
import binascii
import logging
from collections.abc import Iterable

from metricparse.core.errors import ConfigurationError, ParseError
from metricparse.core.merge import MergePolicy, merge_all
from metricparse.core.models import Metric
from metricparse.core.ports import Initializer, SubParser
from metricparse.core.tracking import redistribute

DEFAULT_LOGGER_NAME = "metricparse.processors.parser"


class ParserProcessor:
    """Parse configured fields and tags of each metric with a sub-parser.

    Args:
        parser: Sub-parser handling the payload format. Can also be bound
            later with set_parser().
        parse_fields: Field keys whose values are parsed, in order.
        parse_tags: Tag keys whose values are parsed, in order.
        base64_fields: Field keys whose values are base64-decoded before
            parsing. Keys not in parse_fields are parsed as fields too.
        drop_original: Omit the input metric once any source parsed. Only
            applies to the keep policy; override replaces the input anyway.
        merge: Merge policy name: "keep" (or empty), "override" or
            "override-with-timestamp".
        logger: Logger receiving diagnostics. Defaults to the
            "metricparse.processors.parser" logger.
    """

    def __init__(
        self,
        parser: SubParser | None = None,
        *,
        parse_fields: Iterable[str] = (),
        parse_tags: Iterable[str] = (),
        base64_fields: Iterable[str] = (),
        drop_original: bool = False,
        merge: str = "",
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        self.parse_fields = list(parse_fields)
        self.parse_tags = list(parse_tags)
        self.base64_fields = list(base64_fields)
        self.drop_original = drop_original
        self.merge = merge
        self.log = logger or logging.getLogger(DEFAULT_LOGGER_NAME)
        self._parser: SubParser | None = None
        self._parser_initialized = False
        self._policy: MergePolicy | None = None
        self._base64: frozenset[str] = frozenset()
        self._field_sources: tuple[str, ...] = ()
        if parser is not None:
            self.set_parser(parser)

    @property
    def parser(self) -> SubParser | None:
        return self._parser

    @property
    def policy(self) -> MergePolicy:
        """Resolved merge policy; initializes the processor if needed."""
        if self._policy is None:
            self.init()
        assert self._policy is not None
        return self._policy

    def set_parser(self, parser: SubParser) -> None:
        """Bind the sub-parser, discarding any previously bound one."""
        if not isinstance(parser, SubParser):
            raise TypeError(f"parser must implement parse(), got {type(parser)!r}")
        self._parser = parser
        self._parser_initialized = False

    def init(self) -> None:
        """Validate configuration and initialize the sub-parser.

        Safe to call repeatedly; the bound sub-parser is only initialized
        once until a new one is set.

        Raises:
            ConfigurationError: On an invalid merge policy, a missing
                sub-parser, or a sub-parser that fails to initialize.
        """
        policy = MergePolicy.parse(self.merge)

        for key in self.parse_tags:
            if key in self.base64_fields:
                self.log.warning(
                    "tag %r is listed as a base64 field; "
                    "base64 decoding only applies to fields",
                    key,
                )

        if not (self.parse_fields or self.parse_tags or self.base64_fields):
            self.log.debug("no fields or tags configured, metrics pass through")

        if self._parser is None:
            raise ConfigurationError("no sub-parser configured")
        if not self._parser_initialized and isinstance(self._parser, Initializer):
            try:
                self._parser.init()
            except ConfigurationError:
                raise
            except Exception as exc:
                raise ConfigurationError(f"initializing sub-parser failed: {exc}") from exc
        self._parser_initialized = True

        extra = [k for k in self.base64_fields if k not in self.parse_fields]
        self._field_sources = (*self.parse_fields, *extra)
        self._base64 = frozenset(self.base64_fields)
        self._policy = policy

    def apply(self, metric: Metric) -> list[Metric]:
        """Parse the configured sources of one metric.

        Never raises for per-metric problems; they are logged and the
        affected source is skipped.

        With the keep policy the output is the original, unless dropped,
        followed by the parsed metrics in source order. With an override
        policy every parsed metric is folded into one copy of the original,
        which replaces it. If nothing parsed the original is returned as is.

        Args:
            metric: Incoming metric. Its delivery tracking moves to the
                returned metrics.

        Returns:
            The metrics to emit.
        """
        policy = self.policy
        default_name = metric.name
        parsed: list[Metric] = []

        for key in self.parse_tags:
            value = metric.get_tag(key)
            if value is None:
                self.log.debug("tag %r not found on %r", key, metric.name)
                continue
            if key in self._base64:
                self.log.warning("not decoding tag %r as base64", key)
            parsed.extend(self._parse(value, default_name, f"tag {key!r}"))

        for key in self._field_sources:
            value = metric.get_field(key)
            if value is None:
                self.log.debug("field %r not found on %r", key, metric.name)
                continue
            if not isinstance(value, (str, bytes)):
                self.log.error(
                    "field %r is of type %s, not a string; skipping",
                    key,
                    type(value).__name__,
                )
                continue
            if key in self._base64:
                try:
                    value = _decode_base64(value)
                except (binascii.Error, ValueError) as exc:
                    self.log.error("decoding base64 field %r failed: %s", key, exc)
                    continue
            parsed.extend(self._parse(value, default_name, f"field {key!r}"))

        if not parsed:
            results = [metric]
        elif policy is MergePolicy.KEEP:
            results = [] if self.drop_original else [metric]
            results.extend(parsed)
        else:
            results = [merge_all(metric, parsed, policy, default_name)]
        return redistribute(metric, results)

    def _parse(
        self, data: str | bytes, default_name: str, source: str
    ) -> list[Metric]:
        assert self._parser is not None
        try:
            metrics = self._parser.parse(data, default_name)
        except ParseError as exc:
            self.log.error("could not parse %s: %s", source, exc)
            return []
        except Exception:
            self.log.exception("sub-parser failed on %s", source)
            return []
        if not metrics:
            self.log.debug("no metrics parsed from %s", source)
        return list(metrics)


def _decode_base64(value: str | bytes) -> bytes:
    """Decode standard base64, ignoring embedded line breaks."""
    if isinstance(value, str):
        value = value.encode("ascii")
    return base64.b64decode(value.translate(None, b"\r\n"), validate=True)
