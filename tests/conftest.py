"""Shared test fixtures for all test modules."""

import logging
from collections.abc import Callable, Iterator

import pytest

from metricparse.adapters.logging import LogCaptureHandler
from metricparse.core.errors import ParseError
from metricparse.core.models import Metric
from metricparse.core.processor import DEFAULT_LOGGER_NAME


class StubParser:
    """Sub-parser returning canned metrics per payload.

    Payloads missing from the mapping raise ParseError.
    """

    def __init__(self, results: dict[str | bytes, list[Metric]] | None = None) -> None:
        self.results = results or {}
        self.calls: list[tuple[str | bytes, str | None]] = []
        self.init_calls = 0

    def init(self) -> None:
        self.init_calls += 1

    def parse(self, data: str | bytes, default_name: str | None = None) -> list[Metric]:
        self.calls.append((data, default_name))
        if data not in self.results:
            raise ParseError("unexpected payload", data)
        return [m.copy() for m in self.results[data]]


@pytest.fixture
def stub_parser() -> Callable[..., StubParser]:
    """Factory fixture for StubParser instances."""

    def _make(results: dict[str | bytes, list[Metric]] | None = None) -> StubParser:
        return StubParser(results)

    return _make


@pytest.fixture
def make_metric() -> Callable[..., Metric]:
    """Factory fixture for metrics with a fixed timestamp."""

    def _metric(
        name: str = "test",
        tags: dict[str, str] | None = None,
        fields: dict | None = None,
        timestamp: float = 0.0,
    ) -> Metric:
        return Metric(name=name, tags=tags or {}, fields=fields or {}, timestamp=timestamp)

    return _metric


@pytest.fixture
def captured_logs() -> Iterator[LogCaptureHandler]:
    """Attach a LogCaptureHandler to the processor logger for one test."""
    handler = LogCaptureHandler()
    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield handler
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)
