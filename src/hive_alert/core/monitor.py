import asyncio
import logging

from hive_alert.aggregation import AlertAggregator
from hive_alert.domain import ApiaryData, DisplayAlert, Evaluation, MetricSnapshot
from hive_alert.exceptions import HiveAlertError
from hive_alert.notification import DispatchReport, NotificationDispatcher
from hive_alert.telemetry import TelemetrySource

logger = logging.getLogger(__name__)


class ApiaryMonitor:
    """Periodic refresh loop over a telemetry source.

    Every tick refreshes the apiary frame and the display alerts. If a beehive
    is selected, dispatch runs for that beehive only, in a background task
    the tick does not wait for. Only the report of the most recently launched
    dispatch is kept, and only while its beehive is still selected; older
    reports are stale and are dropped.
    """

    def __init__(
        self,
        source: TelemetrySource,
        aggregator: AlertAggregator,
        dispatcher: NotificationDispatcher,
        interval_seconds: float = 5.0,
    ) -> None:
        self._source = source
        self._aggregator = aggregator
        self._dispatcher = dispatcher
        self._interval = interval_seconds

        self._data: ApiaryData | None = None
        self._previous: dict[str, MetricSnapshot] = {}
        self._alerts: list[DisplayAlert] = []
        self._evaluations: dict[str, Evaluation] = {}
        self._selected_id: str | None = None
        self._generation: int = 0
        self._dispatch_seq: int = 0
        self._tasks: set[asyncio.Task[DispatchReport | None]] = set()
        self.last_dispatch_report: DispatchReport | None = None

    @property
    def data(self) -> ApiaryData | None:
        return self._data

    @property
    def alerts(self) -> list[DisplayAlert]:
        return list(self._alerts)

    @property
    def evaluations(self) -> dict[str, Evaluation]:
        return dict(self._evaluations)

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def selected(self) -> MetricSnapshot | None:
        if self._data is None or self._selected_id is None:
            return None
        return self._data.get(self._selected_id)

    @property
    def pending_dispatches(self) -> int:
        return len(self._tasks)

    def start(self) -> ApiaryData:
        self._data = self._source.initial()
        self._previous = {}
        self._refresh_alerts()
        logger.info(
            "Loaded apiary %s with %d beehives", self._data.apiary_name, len(self._data.beehives)
        )
        return self._data

    async def tick(self) -> list[DisplayAlert]:
        if self._data is None:
            self.start()
            return self.alerts

        previous = self._data
        self._data = self._source.refresh(previous)
        self._previous = previous.by_id()
        self._generation += 1
        self._refresh_alerts()

        selected = self.selected
        if selected is not None:
            self._launch_dispatch(selected)
        elif self._selected_id is not None:
            logger.warning("Selected beehive %s is no longer reported", self._selected_id)
        return self.alerts

    async def select(self, beehive_id: str) -> MetricSnapshot:
        data = self._data if self._data is not None else self.start()
        beehive = data.get(beehive_id)
        if beehive is None:
            raise KeyError(beehive_id)
        self._selected_id = beehive_id
        self._launch_dispatch(beehive)
        return beehive

    def clear_selection(self) -> None:
        self._selected_id = None

    async def run(self, ticks: int | None = None) -> None:
        if self._data is None:
            self.start()
        done = 0
        while ticks is None or done < ticks:
            await asyncio.sleep(self._interval)
            try:
                await self.tick()
            except Exception as exc:
                logger.exception("Error updating apiary data: %s", exc)
            done += 1
        await self.drain()

    async def drain(self) -> None:
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _refresh_alerts(self) -> None:
        if self._data is None:
            raise HiveAlertError("Monitor has not been started")
        beehives = self._data.beehives
        self._evaluations = self._aggregator.evaluate_all(beehives, self._previous)
        self._alerts = self._aggregator.aggregate(beehives, self._previous, self._evaluations)

    def _launch_dispatch(self, beehive: MetricSnapshot) -> None:
        previous = self._previous.get(beehive.id)
        self._dispatch_seq += 1
        task = asyncio.get_running_loop().create_task(
            self._dispatch(beehive, previous, self._dispatch_seq)
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_dispatch_done)

    async def _dispatch(
        self, beehive: MetricSnapshot, previous: MetricSnapshot | None, seq: int
    ) -> DispatchReport | None:
        report = await self._dispatcher.dispatch(beehive, previous)
        if seq != self._dispatch_seq or beehive.id != self._selected_id:
            logger.info(
                "Discarding stale dispatch report for %s (request %d, latest %d, selected %s)",
                beehive.id,
                seq,
                self._dispatch_seq,
                self._selected_id,
            )
            return None
        self.last_dispatch_report = report
        if report.failed:
            logger.warning(
                "%d of %d notifications for %s were not delivered",
                len(report.failed),
                len(report.deliveries),
                beehive.id,
            )
        return report

    def _on_dispatch_done(self, task: "asyncio.Task[DispatchReport | None]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Notification dispatch failed: %s", exc, exc_info=exc)
