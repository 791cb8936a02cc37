"""Core domain models for beehive telemetry and alerting."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, IntEnum, StrEnum
from typing import Any

from hive_alert.exceptions import InvalidSnapshotError


class Severity(IntEnum):
    """Alert severity levels, ordered for comparison (higher value = higher severity)."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3

    @classmethod
    def parse(cls, value: "str | Severity") -> "Severity":
        if isinstance(value, Severity):
            return value
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown severity: {value!r}") from None


class IssueSeverity(Enum):
    """Severity of a single evaluator finding."""

    WARNING = "warning"
    CRITICAL = "critical"


class HiveStatus(StrEnum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertType(StrEnum):
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    WEIGHT = "weight"
    POPULATION = "population"
    ACTIVITY = "activity"
    VARROA = "varroa"
    OTHER = "other"


class MetricKind(StrEnum):
    """Metrics checked by the evaluator."""

    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    VARROA = "varroa"
    WEIGHT = "weight"
    ENTRANCE_ACTIVITY = "entrance_activity"

    @property
    def alert_type(self) -> AlertType:
        return _METRIC_ALERT_TYPES[self]


_METRIC_ALERT_TYPES: dict[MetricKind, AlertType] = {
    MetricKind.TEMPERATURE: AlertType.TEMPERATURE,
    MetricKind.HUMIDITY: AlertType.HUMIDITY,
    MetricKind.VARROA: AlertType.VARROA,
    MetricKind.WEIGHT: AlertType.WEIGHT,
    MetricKind.ENTRANCE_ACTIVITY: AlertType.ACTIVITY,
}


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def parse_timestamp(value: str | datetime) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if isinstance(value, datetime):
        return _as_utc(value)
    return _as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))


@dataclass(frozen=True, slots=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class HiveMetrics:
    """Current sensor readings of one beehive.

    All values must be finite numbers. Humidity and the activity scores are
    expected in [0, 100] but clamping is the producer's job.
    """

    temperature: float
    humidity: float
    weight: float
    entrance_activity: float
    varroa_mite_level: float
    queen_activity: float
    population_estimate: int

    def __post_init__(self) -> None:
        for name in (
            "temperature",
            "humidity",
            "weight",
            "entrance_activity",
            "varroa_mite_level",
            "queen_activity",
            "population_estimate",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidSnapshotError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidSnapshotError(f"{name} must be finite, got {value!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HiveMetrics":
        return cls(
            temperature=float(data["temperature"]),
            humidity=float(data["humidity"]),
            weight=float(data["weight"]),
            entrance_activity=float(data["entranceActivity"]),
            varroa_mite_level=float(data["varroaMiteLevel"]),
            queen_activity=float(data["queenActivity"]),
            population_estimate=int(data["populationEstimate"]),
        )


@dataclass(frozen=True, slots=True)
class AlertRecord:
    """A stored alert attached to a beehive, owned by whoever created it."""

    id: str
    type: AlertType
    severity: Severity
    message: str
    timestamp: datetime
    resolved: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "timestamp", _as_utc(self.timestamp))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AlertRecord":
        return cls(
            id=str(data["id"]),
            type=AlertType(data["type"]),
            severity=Severity.parse(data["severity"]),
            message=str(data["message"]),
            timestamp=parse_timestamp(data["timestamp"]),
            resolved=bool(data.get("resolved", False)),
        )


@dataclass(frozen=True, slots=True)
class MetricSnapshot:
    """One beehive's state at a point in time."""

    id: str
    name: str
    location: str
    metrics: HiveMetrics
    status: HiveStatus = HiveStatus.HEALTHY
    last_updated: datetime = field(default_factory=lambda: datetime.now(UTC))
    coordinates: Coordinates | None = None
    alerts: tuple[AlertRecord, ...] = ()

    def unresolved_alerts(self) -> tuple[AlertRecord, ...]:
        return tuple(alert for alert in self.alerts if not alert.resolved)


@dataclass(frozen=True, slots=True)
class IssueMessage:
    """A single evaluator finding."""

    metric: MetricKind
    severity: IssueSeverity
    text: str

    @property
    def is_critical(self) -> bool:
        return self.severity is IssueSeverity.CRITICAL


@dataclass(frozen=True, slots=True)
class Evaluation:
    """Evaluator result for one snapshot (and its optional predecessor)."""

    is_critical: bool = False
    messages: tuple[IssueMessage, ...] = ()

    @property
    def texts(self) -> tuple[str, ...]:
        return tuple(message.text for message in self.messages)

    @property
    def critical_messages(self) -> tuple[IssueMessage, ...]:
        return tuple(message for message in self.messages if message.is_critical)


@dataclass(frozen=True, slots=True)
class DisplayAlert:
    """An alert ready for display, from a stored record or the evaluator."""

    id: str
    type: AlertType
    severity: Severity
    message: str
    timestamp: datetime
    beehive_id: str
    beehive_name: str
    status: HiveStatus
    resolved: bool = False
    is_critical_metric: bool = False
    issue_severity: IssueSeverity | None = None

    @property
    def key(self) -> tuple[str, AlertType]:
        return (self.beehive_id, self.type)


@dataclass(frozen=True, slots=True)
class NotificationConfig:
    """Recipients, channel toggles and the severity floor for stored alerts."""

    enable_email: bool = True
    enable_sms: bool = True
    email_recipients: tuple[str, ...] = ()
    phone_numbers: tuple[str, ...] = ()
    alert_threshold: Severity = Severity.MEDIUM
    enable_activity_checks: bool = False


@dataclass(frozen=True, slots=True)
class ApiaryStatistics:
    total_beehives: int = 0
    healthy_beehives: int = 0
    warning_beehives: int = 0
    critical_beehives: int = 0
    average_temperature: float = 0.0
    average_humidity: float = 0.0
    average_varroa_mite_level: float = 0.0


@dataclass(frozen=True, slots=True)
class ApiaryData:
    apiary_name: str
    location: str
    beehives: tuple[MetricSnapshot, ...]
    statistics: ApiaryStatistics = field(default_factory=ApiaryStatistics)

    def by_id(self) -> dict[str, MetricSnapshot]:
        return {beehive.id: beehive for beehive in self.beehives}

    def get(self, beehive_id: str) -> MetricSnapshot | None:
        for beehive in self.beehives:
            if beehive.id == beehive_id:
                return beehive
        return None
