"""Synthetic apiary telemetry.

Generates a demo apiary of beehives with jittered readings. Two beehives are
pinned so their alerts persist across refreshes: ``hive-1`` keeps a humidity
of 78.5% with a HIGH humidity record and ``hive-7`` keeps a varroa level of
2.8% with a MEDIUM varroa record.
"""

import random
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime, timedelta

from hive_alert.domain import (
    AlertRecord,
    AlertType,
    ApiaryData,
    Coordinates,
    HiveMetrics,
    HiveStatus,
    MetricSnapshot,
    Severity,
)
from hive_alert.telemetry.statistics import compute_statistics

APIARY_NAME = "Cornell Apiary"
APIARY_LOCATION = "Ithaca, NY"
BEEHIVE_LOCATION = "Cornell Apiary"

# Cornell Botanical Gardens
LATITUDE_BASE = 42.4509
LONGITUDE_BASE = -76.4693

HUMIDITY_HIVE_ID = "hive-1"
VARROA_HIVE_ID = "hive-7"
PINNED_HUMIDITY = 78.5
PINNED_VARROA_LEVEL = 2.8


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class MockTelemetrySource:
    def __init__(
        self,
        beehive_count: int = 12,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if beehive_count < 1:
            raise ValueError("beehive_count must be at least 1")
        self._count = beehive_count
        self._rng = rng or random.Random()
        self._clock = clock
        self._latest: dict[str, MetricSnapshot] = {}

    def initial(self) -> ApiaryData:
        beehives = tuple(
            self._generate_beehive(f"hive-{i}", f"Hive {i}") for i in range(1, self._count + 1)
        )
        return self._apiary(beehives)

    def refresh(self, previous: ApiaryData) -> ApiaryData:
        beehives = tuple(self._update_beehive(beehive) for beehive in previous.beehives)
        return replace(self._apiary(beehives), apiary_name=previous.apiary_name, location=previous.location)

    def next_snapshot(self, beehive_id: str) -> MetricSnapshot:
        if beehive_id not in self._latest:
            raise KeyError(beehive_id)
        return self._update_beehive(self._latest[beehive_id])

    def _apiary(self, beehives: tuple[MetricSnapshot, ...]) -> ApiaryData:
        return ApiaryData(
            apiary_name=APIARY_NAME,
            location=APIARY_LOCATION,
            beehives=beehives,
            statistics=compute_statistics(beehives),
        )

    def _uniform(self, low: float, high: float) -> float:
        return self._rng.uniform(low, high)

    def _generate_beehive(self, beehive_id: str, name: str) -> MetricSnapshot:
        if beehive_id == VARROA_HIVE_ID:
            varroa = PINNED_VARROA_LEVEL
        else:
            varroa = self._uniform(0, 1.5)

        if beehive_id == HUMIDITY_HIVE_ID:
            humidity = PINNED_HUMIDITY
        else:
            humidity = self._uniform(55, 65)

        metrics = HiveMetrics(
            temperature=round(self._uniform(32, 36), 2),
            humidity=round(humidity, 2),
            weight=round(self._uniform(25, 35), 2),
            entrance_activity=round(self._uniform(30, 95), 2),
            varroa_mite_level=round(varroa, 2),
            queen_activity=round(self._uniform(0, 100), 2),
            population_estimate=self._rng.randint(10000, 49999),
        )
        snapshot = MetricSnapshot(
            id=beehive_id,
            name=name,
            location=BEEHIVE_LOCATION,
            metrics=metrics,
            status=self._status_for(beehive_id),
            last_updated=self._clock(),
            coordinates=Coordinates(
                latitude=LATITUDE_BASE + self._uniform(-0.0025, 0.0025),
                longitude=LONGITUDE_BASE + self._uniform(-0.0025, 0.0025),
            ),
            alerts=self._pinned_alerts(beehive_id),
        )
        self._latest[beehive_id] = snapshot
        return snapshot

    def _update_beehive(self, beehive: MetricSnapshot) -> MetricSnapshot:
        current = beehive.metrics

        if beehive.id == HUMIDITY_HIVE_ID:
            humidity = PINNED_HUMIDITY
        else:
            humidity = _clamp(current.humidity + self._uniform(-1, 1), 50, 70)

        if beehive.id == VARROA_HIVE_ID:
            varroa = PINNED_VARROA_LEVEL
        else:
            varroa = _clamp(current.varroa_mite_level + self._uniform(-0.1, 0.1), 0, 1.5)

        metrics = replace(
            current,
            temperature=round(current.temperature + self._uniform(-0.5, 0.5), 2),
            humidity=round(humidity, 2),
            weight=round(current.weight + self._uniform(-0.1, 0.1), 2),
            entrance_activity=round(_clamp(current.entrance_activity + self._uniform(-5, 5), 0, 100), 2),
            queen_activity=round(_clamp(current.queen_activity + self._uniform(-3, 3), 0, 100), 2),
            varroa_mite_level=round(varroa, 2),
        )

        coordinates = beehive.coordinates
        if coordinates is not None:
            coordinates = Coordinates(
                latitude=coordinates.latitude + self._uniform(-0.0001, 0.0001),
                longitude=coordinates.longitude + self._uniform(-0.0001, 0.0001),
            )

        alerts = beehive.alerts or self._pinned_alerts(beehive.id)
        snapshot = replace(
            beehive,
            metrics=metrics,
            status=self._status_for(beehive.id),
            last_updated=self._clock(),
            coordinates=coordinates,
            alerts=alerts,
        )
        self._latest[beehive.id] = snapshot
        return snapshot

    @staticmethod
    def _status_for(beehive_id: str) -> HiveStatus:
        if beehive_id in (HUMIDITY_HIVE_ID, VARROA_HIVE_ID):
            return HiveStatus.WARNING
        return HiveStatus.HEALTHY

    def _pinned_alerts(self, beehive_id: str) -> tuple[AlertRecord, ...]:
        timestamp = self._clock() - timedelta(hours=self._rng.randint(0, 5))
        if beehive_id == VARROA_HIVE_ID:
            return (
                AlertRecord(
                    id=f"alert-{beehive_id}-varroa",
                    type=AlertType.VARROA,
                    severity=Severity.MEDIUM,
                    message=f"Warning: Varroa mite level elevated: {PINNED_VARROA_LEVEL}%",
                    timestamp=timestamp,
                ),
            )
        if beehive_id == HUMIDITY_HIVE_ID:
            return (
                AlertRecord(
                    id=f"alert-{beehive_id}-humidity",
                    type=AlertType.HUMIDITY,
                    severity=Severity.HIGH,
                    message=f"Humidity level too high: {PINNED_HUMIDITY}%",
                    timestamp=timestamp,
                ),
            )
        return ()
