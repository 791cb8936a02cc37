from typing import Protocol, runtime_checkable

from hive_alert.domain import ApiaryData, MetricSnapshot


@runtime_checkable
class TelemetrySource(Protocol):
    """Protocol for sources of beehive snapshots."""

    def initial(self) -> ApiaryData:
        ...

    def refresh(self, previous: ApiaryData) -> ApiaryData:
        ...

    def next_snapshot(self, beehive_id: str) -> MetricSnapshot:
        ...
