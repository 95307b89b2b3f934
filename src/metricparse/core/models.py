"""Core domain models for metrics flowing through processors."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from metricparse.core.tracking import DeliveryHandle

FieldValue = str | bytes | int | float | bool


@dataclass(frozen=True)
class LogEntry:
    """A structured log entry.

    Attributes:
        timestamp: Unix timestamp in seconds.
        level: Log level (e.g., INFO, ERROR, DEBUG).
        message: The log message.
        attributes: Additional structured fields.
    """

    timestamp: float
    level: str
    message: str
    attributes: dict[str, str | int | float | bool] = field(default_factory=dict)


@dataclass
class Metric:
    """A single measurement with tags, fields and a timestamp.

    Metrics are mutable while a processor holds them. Equality only looks at
    name, tags, fields and timestamp; the delivery handle is ignored.

    Attributes:
        name: Measurement name (e.g., cpu).
        tags: Key-value pairs identifying the series.
        fields: Key-value pairs holding the measured values.
        timestamp: Unix timestamp in seconds.
    """

    name: str
    tags: dict[str, str] = field(default_factory=dict)
    fields: dict[str, FieldValue] = field(default_factory=dict)
    timestamp: float = 0.0
    delivery: DeliveryHandle | None = field(default=None, repr=False, compare=False)

    def has_tag(self, key: str) -> bool:
        return key in self.tags

    def get_tag(self, key: str) -> str | None:
        return self.tags.get(key)

    def add_tag(self, key: str, value: str) -> None:
        self.tags[key] = value

    def remove_tag(self, key: str) -> None:
        self.tags.pop(key, None)

    def has_field(self, key: str) -> bool:
        return key in self.fields

    def get_field(self, key: str) -> FieldValue | None:
        return self.fields.get(key)

    def add_field(self, key: str, value: FieldValue) -> None:
        self.fields[key] = value

    def remove_field(self, key: str) -> None:
        self.fields.pop(key, None)

    def copy(self) -> Metric:
        """Return an untracked copy with independent tag and field maps."""
        return Metric(
            name=self.name,
            tags=dict(self.tags),
            fields=dict(self.fields),
            timestamp=self.timestamp,
        )

    def detach_delivery(self) -> DeliveryHandle | None:
        """Remove and return the delivery handle, if any."""
        handle = self.delivery
        self.delivery = None
        return handle

    def accept(self) -> None:
        """Mark the metric as successfully delivered downstream."""
        if self.delivery is not None:
            self.delivery.accept()

    def reject(self) -> None:
        """Mark the metric as rejected by a downstream consumer."""
        if self.delivery is not None:
            self.delivery.reject()

    def drop(self) -> None:
        """Discard the metric; counts as delivered for tracking purposes."""
        if self.delivery is not None:
            self.delivery.accept()
