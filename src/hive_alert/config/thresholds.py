"""Static threshold configuration for the critical metric evaluator.

A ``ThresholdTable`` is built once at startup and passed to the evaluator.
Construction validates every row and raises ``ConfigurationError`` on the
first inconsistent one, so a malformed table never reaches evaluation.
"""

from dataclasses import dataclass, replace
from typing import Any

from hive_alert.exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class RangeThreshold:
    """Ideal and critical bounds for a range-bounded metric."""

    ideal_min: float
    ideal_max: float
    critical_min: float
    critical_max: float
    unit: str

    def validate(self, metric: str) -> None:
        if not (self.critical_min <= self.ideal_min <= self.ideal_max <= self.critical_max):
            raise ConfigurationError(
                f"{metric}: expected critical_min <= ideal_min <= ideal_max <= critical_max, "
                f"got {self.critical_min}, {self.ideal_min}, {self.ideal_max}, {self.critical_max}"
            )


@dataclass(frozen=True, slots=True)
class LevelThreshold:
    """Warning and critical levels for a metric that is only bad when high."""

    warning_level: float
    critical_level: float
    unit: str

    def validate(self, metric: str) -> None:
        if not self.warning_level < self.critical_level:
            raise ConfigurationError(
                f"{metric}: warning_level ({self.warning_level}) must be below "
                f"critical_level ({self.critical_level})"
            )


@dataclass(frozen=True, slots=True)
class DeltaThreshold:
    """Critical change between two consecutive readings (negative = drop)."""

    critical_delta: float
    unit: str

    def validate(self, metric: str) -> None:
        if not self.critical_delta < 0:
            raise ConfigurationError(
                f"{metric}: critical_delta must be negative, got {self.critical_delta}"
            )


@dataclass(frozen=True, slots=True)
class MinimumThreshold:
    minimum: float
    unit: str

    def validate(self, metric: str) -> None:
        if self.minimum < 0:
            raise ConfigurationError(f"{metric}: minimum must be >= 0, got {self.minimum}")


@dataclass(frozen=True, slots=True)
class ThresholdTable:
    temperature: RangeThreshold
    humidity: RangeThreshold
    varroa: LevelThreshold
    weight: DeltaThreshold
    entrance_activity: MinimumThreshold

    def __post_init__(self) -> None:
        self.temperature.validate("temperature")
        self.humidity.validate("humidity")
        self.varroa.validate("varroa")
        self.weight.validate("weight")
        self.entrance_activity.validate("entrance_activity")

    def with_overrides(self, **rows: Any) -> "ThresholdTable":
        """Return a validated copy with some rows replaced."""
        return replace(self, **rows)


DEFAULT_THRESHOLDS = ThresholdTable(
    temperature=RangeThreshold(
        ideal_min=31.5,
        ideal_max=37.0,
        critical_min=30.0,
        critical_max=38.0,
        unit="°C",
    ),
    humidity=RangeThreshold(
        ideal_min=50.0,
        ideal_max=75.0,
        critical_min=50.0,
        critical_max=75.0,
        unit="%",
    ),
    varroa=LevelThreshold(warning_level=2.0, critical_level=3.0, unit="%"),
    weight=DeltaThreshold(critical_delta=-1.0, unit="kg"),
    entrance_activity=MinimumThreshold(minimum=20.0, unit="activity rate"),
)
