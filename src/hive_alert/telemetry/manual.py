from collections.abc import Sequence

from hive_alert.domain import ApiaryData, MetricSnapshot


class ManualTelemetrySource:
    """Replays a fixed sequence of apiary frames.

    ``refresh`` moves to the next frame and keeps returning the last one once
    the sequence is exhausted.
    """

    def __init__(self, frames: Sequence[ApiaryData]) -> None:
        if not frames:
            raise ValueError("ManualTelemetrySource needs at least one frame")
        self._frames: tuple[ApiaryData, ...] = tuple(frames)
        self._index: int = 0

    def initial(self) -> ApiaryData:
        self._index = 0
        return self._frames[0]

    def refresh(self, previous: ApiaryData) -> ApiaryData:
        if self._index < len(self._frames) - 1:
            self._index += 1
        return self._frames[self._index]

    def next_snapshot(self, beehive_id: str) -> MetricSnapshot:
        snapshot = self._frames[self._index].get(beehive_id)
        if snapshot is None:
            raise KeyError(beehive_id)
        return snapshot

    @property
    def position(self) -> int:
        return self._index
