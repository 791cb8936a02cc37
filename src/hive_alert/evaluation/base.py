from typing import Protocol, runtime_checkable

from hive_alert.domain import IssueMessage, MetricKind, MetricSnapshot


@runtime_checkable
class MetricRule(Protocol):
    """Protocol for single-metric evaluation rules."""

    @property
    def metric(self) -> MetricKind:
        ...

    def check(self, current: MetricSnapshot, previous: MetricSnapshot | None) -> IssueMessage | None:
        ...
