"""Merge policies combining an original metric with a parsed one."""

from collections.abc import Sequence
from enum import Enum

from metricparse.core.errors import ConfigurationError
from metricparse.core.models import Metric


class MergePolicy(Enum):
    """How a parsed metric is combined with the metric it came from."""

    KEEP = "keep"
    OVERRIDE = "override"
    OVERRIDE_WITH_TIMESTAMP = "override-with-timestamp"

    @classmethod
    def parse(cls, value: str | None) -> "MergePolicy":
        """Resolve a configured policy name.

        An empty or missing value selects KEEP.

        Raises:
            ConfigurationError: If the name is not a known policy.
        """
        if not value:
            return cls.KEEP
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(repr(p.value) for p in cls)
            raise ConfigurationError(
                f"invalid merge policy {value!r}, expected one of {valid}"
            ) from None


def overlay(original: Metric, parsed: Metric) -> Metric:
    """Return a copy of original with parsed tags and fields laid on top."""
    result = original.copy()
    result.tags.update(parsed.tags)
    result.fields.update(parsed.fields)
    return result


def merge(
    original: Metric,
    parsed: Metric,
    policy: MergePolicy,
    default_name: str | None = None,
) -> Metric:
    """Combine an original metric with one parsed from it.

    The original is never modified.

    Args:
        original: Metric the payload was taken from.
        parsed: Metric produced by the sub-parser.
        policy: Merge policy to apply.
        default_name: Name the sub-parser was given; a parsed name that
            differs from it was derived from the payload and wins on merge.

    Returns:
        The metric to emit for this parsed metric.
    """
    if policy is MergePolicy.KEEP:
        return parsed
    return merge_all(original, [parsed], policy, default_name)


def merge_all(
    original: Metric,
    parsed: Sequence[Metric],
    policy: MergePolicy,
    default_name: str | None = None,
) -> Metric:
    """Fold every parsed metric, in order, into a copy of the original.

    Later parsed metrics win over earlier ones for the same tag or field key,
    the measurement name and, with OVERRIDE_WITH_TIMESTAMP, the timestamp.

    Raises:
        ValueError: If policy is KEEP, which never merges.
    """
    if policy is MergePolicy.KEEP:
        raise ValueError("the keep policy does not merge metrics")

    result = original.copy()
    for metric in parsed:
        result = overlay(result, metric)
        if metric.name and metric.name != default_name:
            result.name = metric.name
        if policy is MergePolicy.OVERRIDE_WITH_TIMESTAMP:
            result.timestamp = metric.timestamp
    return result
