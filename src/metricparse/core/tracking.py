"""Delivery tracking for metrics.

A tracked metric carries a DeliveryHandle. When the metric is accepted,
rejected or dropped downstream, the handle resolves its TrackingGroup, and
once every member of the group is resolved the group's notifier fires with
a DeliveryInfo. Processors that turn one metric into several hand each
output its own handle through redistribute().
"""

import itertools
import threading
from collections.abc import Callable
from dataclasses import dataclass

from metricparse.core.models import Metric


@dataclass(frozen=True)
class DeliveryInfo:
    """Outcome reported to a delivery notifier.

    Attributes:
        id: Tracking id returned by with_tracking().
        delivered: True if no derived metric was rejected.
    """

    id: int
    delivered: bool


Notifier = Callable[[DeliveryInfo], None]

_ids = itertools.count(1)
_ids_lock = threading.Lock()


def _next_id() -> int:
    with _ids_lock:
        return next(_ids)


class TrackingGroup:
    """Aggregates the outcome of a fixed number of delivery handles.

    The notifier fires exactly once, when the last outstanding member
    resolves. Safe to resolve from several threads.

    Args:
        notify: Callback receiving the aggregate DeliveryInfo.
        count: Number of members that must resolve.
        tracking_id: Id reported in DeliveryInfo.
    """

    def __init__(self, notify: Notifier, count: int, tracking_id: int) -> None:
        if count < 1:
            raise ValueError("tracking group needs at least one member")
        self._notify = notify
        self._outstanding = count
        self._rejected = 0
        self._fired = False
        self._lock = threading.Lock()
        self.id = tracking_id

    @property
    def outstanding(self) -> int:
        with self._lock:
            return self._outstanding

    def resolve(self, accepted: bool) -> None:
        """Record the outcome of one member."""
        with self._lock:
            if self._fired:
                return
            self._outstanding -= 1
            if not accepted:
                self._rejected += 1
            if self._outstanding > 0:
                return
            self._fired = True
            info = DeliveryInfo(id=self.id, delivered=self._rejected == 0)
        self._notify(info)


class DeliveryHandle:
    """Single-use slot in a TrackingGroup.

    Only the first accept() or reject() counts; later calls are ignored.
    """

    def __init__(self, group: TrackingGroup) -> None:
        self._group = group
        self._done = False
        self._lock = threading.Lock()

    @property
    def id(self) -> int:
        return self._group.id

    @property
    def resolved(self) -> bool:
        with self._lock:
            return self._done

    def accept(self) -> None:
        self._finish(True)

    def reject(self) -> None:
        self._finish(False)

    def _finish(self, accepted: bool) -> None:
        with self._lock:
            if self._done:
                return
            self._done = True
        self._group.resolve(accepted)


def with_tracking(metric: Metric, notify: Notifier) -> tuple[Metric, int]:
    """Attach delivery tracking to a metric.

    Args:
        metric: Metric to track. Any existing handle is replaced.
        notify: Called once with the DeliveryInfo when the metric (and every
            metric derived from it) has been accepted, rejected or dropped.

    Returns:
        The tracked metric and its tracking id.
    """
    group = TrackingGroup(notify, 1, _next_id())
    metric.delivery = DeliveryHandle(group)
    return metric, group.id


def redistribute(original: Metric, outputs: list[Metric]) -> list[Metric]:
    """Move the original metric's delivery handle onto its outputs.

    Each output gets its own handle in a new group whose completion resolves
    the original handle. The original may itself be one of the outputs.
    With no outputs the original handle resolves as delivered right away.

    Args:
        original: The metric a processor received.
        outputs: Metrics the processor is about to emit.

    Returns:
        The outputs, for chaining.
    """
    parent = original.detach_delivery()
    if parent is None:
        return outputs
    if not outputs:
        parent.accept()
        return outputs

    def _complete(info: DeliveryInfo) -> None:
        if info.delivered:
            parent.accept()
        else:
            parent.reject()

    group = TrackingGroup(_complete, len(outputs), parent.id)
    for output in outputs:
        output.delivery = DeliveryHandle(group)
    return outputs
