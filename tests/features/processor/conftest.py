"""Step definitions for parser processor BDD tests."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from metricparse.adapters.logging import LogCaptureHandler
from metricparse.adapters.parsers import JSONParser
from metricparse.core.errors import ConfigurationError
from metricparse.core.models import Metric
from metricparse.core.processor import ParserProcessor
from metricparse.core.tracking import DeliveryInfo, with_tracking

LOGGER_NAME = "metricparse.tests.features"


@dataclass
class ProcessorScenarioContext:
    """Shared state between steps in a processor scenario."""

    tag_keys: list[str] = field(default_factory=list)
    parse_fields: list[str] = field(default_factory=list)
    merge: str = ""
    drop_original: bool = False
    tracked: bool = False
    expected_input: Metric | None = None
    output: list[Metric] = field(default_factory=list)
    delivered: list[DeliveryInfo] = field(default_factory=list)
    logs: LogCaptureHandler = field(default_factory=LogCaptureHandler)

    def processor(self) -> ParserProcessor:
        return ParserProcessor(
            JSONParser(tag_keys=self.tag_keys),
            parse_fields=self.parse_fields,
            drop_original=self.drop_original,
            merge=self.merge,
            logger=logging.getLogger(LOGGER_NAME),
        )


@pytest.fixture
def ctx() -> Iterator[ProcessorScenarioContext]:
    """Fresh scenario context with log capture for each test."""
    context = ProcessorScenarioContext()
    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(context.logs)
    logger.setLevel(logging.DEBUG)
    try:
        yield context
    finally:
        logger.removeHandler(context.logs)


def _pairs(text: str) -> dict[str, str]:
    return dict(pair.split("=", 1) for pair in text.split(","))


# === Given ===


@given(parsers.parse('a JSON sub-parser with tag keys "{keys}"'))
def step_json_parser(ctx: ProcessorScenarioContext, keys: str) -> None:
    ctx.tag_keys = keys.split(",")


@given(parsers.parse('the processor parses the field "{key}"'))
def step_parse_field(ctx: ProcessorScenarioContext, key: str) -> None:
    ctx.parse_fields.append(key)


@given(parsers.parse('the merge policy "{policy}"'))
def step_merge_policy(ctx: ProcessorScenarioContext, policy: str) -> None:
    ctx.merge = policy


@given("the original is dropped")
def step_drop_original(ctx: ProcessorScenarioContext) -> None:
    ctx.drop_original = True


@given("the input metric is tracked")
def step_tracked(ctx: ProcessorScenarioContext) -> None:
    ctx.tracked = True


# === When ===


@when(parsers.parse("the metric \"{name}\" with message '{payload}' is processed"))
def step_process(ctx: ProcessorScenarioContext, name: str, payload: str) -> None:
    metric = Metric(name, tags={"host": "web-1"}, fields={"message": payload}, timestamp=10.0)
    ctx.expected_input = metric.copy()
    if ctx.tracked:
        metric, _ = with_tracking(metric, ctx.delivered.append)
    processor = ctx.processor()
    processor.init()
    ctx.output = processor.apply(metric)


@when("every emitted metric is accepted")
def step_accept_all(ctx: ProcessorScenarioContext) -> None:
    for metric in ctx.output:
        metric.accept()


# === Then ===


@then(parsers.parse("{count:d} metrics are emitted"))
def step_count(ctx: ProcessorScenarioContext, count: int) -> None:
    assert len(ctx.output) == count


@then(parsers.parse("metric {index:d} is the unchanged input"))
def step_unchanged(ctx: ProcessorScenarioContext, index: int) -> None:
    assert ctx.output[index - 1] == ctx.expected_input


@then(parsers.parse('metric {index:d} has tags "{tags}"'))
def step_tags(ctx: ProcessorScenarioContext, index: int, tags: str) -> None:
    assert ctx.output[index - 1].tags == _pairs(tags)


@then(parsers.parse("metric {index:d} keeps the input timestamp"))
def step_timestamp(ctx: ProcessorScenarioContext, index: int) -> None:
    assert ctx.expected_input is not None
    assert ctx.output[index - 1].timestamp == ctx.expected_input.timestamp


@then(parsers.parse('an error mentioning "{text}" was logged'))
def step_error_logged(ctx: ProcessorScenarioContext, text: str) -> None:
    assert any(text in entry.message for entry in ctx.logs.errors())


@then("the input has not been acknowledged")
def step_not_acknowledged(ctx: ProcessorScenarioContext) -> None:
    assert ctx.delivered == []


@then("the input has been acknowledged once")
def step_acknowledged(ctx: ProcessorScenarioContext) -> None:
    assert len(ctx.delivered) == 1
    assert ctx.delivered[0].delivered is True


@then("initialization fails with a configuration error")
def step_init_fails(ctx: ProcessorScenarioContext) -> None:
    with pytest.raises(ConfigurationError):
        ctx.processor().init()
