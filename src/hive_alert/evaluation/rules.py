from hive_alert.config.thresholds import (
    DeltaThreshold,
    LevelThreshold,
    MinimumThreshold,
    RangeThreshold,
)
from hive_alert.domain import IssueMessage, IssueSeverity, MetricKind, MetricSnapshot


def _fmt(value: float) -> str:
    return f"{value:.2f}"


class RangeRule:
    """Checks a metric against ideal and critical bounds.

    Branches are tried in order critical-low, critical-high, warning-low,
    warning-high; the first match wins.
    """

    def __init__(self, metric: MetricKind, label: str, threshold: RangeThreshold) -> None:
        self._metric = metric
        self._label = label
        self._threshold = threshold

    @property
    def metric(self) -> MetricKind:
        return self._metric

    def _value(self, snapshot: MetricSnapshot) -> float:
        return float(getattr(snapshot.metrics, self._metric.value))

    def check(self, current: MetricSnapshot, previous: MetricSnapshot | None) -> IssueMessage | None:
        value = self._value(current)
        t = self._threshold
        unit = t.unit

        if value < t.critical_min:
            return self._issue(
                IssueSeverity.CRITICAL,
                f"{self._label} critically low: {_fmt(value)}{unit} (below {_fmt(t.critical_min)}{unit})",
            )
        if value > t.critical_max:
            return self._issue(
                IssueSeverity.CRITICAL,
                f"{self._label} critically high: {_fmt(value)}{unit} (above {_fmt(t.critical_max)}{unit})",
            )
        if value < t.ideal_min:
            return self._issue(
                IssueSeverity.WARNING,
                f"{self._label} warning: {_fmt(value)}{unit} "
                f"(below ideal minimum {_fmt(t.ideal_min)}{unit})",
            )
        if value > t.ideal_max:
            return self._issue(
                IssueSeverity.WARNING,
                f"{self._label} warning: {_fmt(value)}{unit} "
                f"(above ideal maximum {_fmt(t.ideal_max)}{unit})",
            )
        return None

    def _issue(self, severity: IssueSeverity, text: str) -> IssueMessage:
        return IssueMessage(metric=self._metric, severity=severity, text=text)


class TemperatureRule(RangeRule):
    def __init__(self, threshold: RangeThreshold) -> None:
        super().__init__(MetricKind.TEMPERATURE, "Temperature", threshold)


class HumidityRule(RangeRule):
    def __init__(self, threshold: RangeThreshold) -> None:
        super().__init__(MetricKind.HUMIDITY, "Humidity", threshold)


class VarroaRule:
    metric: MetricKind = MetricKind.VARROA

    def __init__(self, threshold: LevelThreshold) -> None:
        self._threshold = threshold

    def check(self, current: MetricSnapshot, previous: MetricSnapshot | None) -> IssueMessage | None:
        level = current.metrics.varroa_mite_level
        t = self._threshold

        if level > t.critical_level:
            return IssueMessage(
                metric=self.metric,
                severity=IssueSeverity.CRITICAL,
                text=(
                    f"Varroa mite level critically high: {_fmt(level)}{t.unit} "
                    f"(above critical threshold {_fmt(t.critical_level)}{t.unit})"
                ),
            )
        if level > t.warning_level:
            return IssueMessage(
                metric=self.metric,
                severity=IssueSeverity.WARNING,
                text=(
                    f"Varroa mite level warning: {_fmt(level)}{t.unit} "
                    f"(above warning threshold {_fmt(t.warning_level)}{t.unit})"
                ),
            )
        return None


class WeightDropRule:
    """Flags a sudden weight loss between two consecutive readings.

    Without a previous reading the rule does not apply.
    """

    metric: MetricKind = MetricKind.WEIGHT

    def __init__(self, threshold: DeltaThreshold) -> None:
        self._threshold = threshold

    def check(self, current: MetricSnapshot, previous: MetricSnapshot | None) -> IssueMessage | None:
        if previous is None:
            return None

        delta = current.metrics.weight - previous.metrics.weight
        if delta >= self._threshold.critical_delta:
            return None

        unit = self._threshold.unit
        return IssueMessage(
            metric=self.metric,
            severity=IssueSeverity.CRITICAL,
            text=(
                f"Weight critically decreased: {_fmt(current.metrics.weight)}{unit} "
                f"(dropped {_fmt(abs(delta))}{unit} since last reading)"
            ),
        )


class EntranceActivityRule:
    metric: MetricKind = MetricKind.ENTRANCE_ACTIVITY

    def __init__(self, threshold: MinimumThreshold) -> None:
        self._threshold = threshold

    def check(self, current: MetricSnapshot, previous: MetricSnapshot | None) -> IssueMessage | None:
        activity = current.metrics.entrance_activity
        if activity >= self._threshold.minimum:
            return None
        return IssueMessage(
            metric=self.metric,
            severity=IssueSeverity.CRITICAL,
            text=(
                f"Entrance activity critically low: {_fmt(activity)} "
                f"(below {_fmt(self._threshold.minimum)})"
            ),
        )
