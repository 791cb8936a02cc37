from collections.abc import Callable, Mapping, Sequence
from datetime import UTC, datetime

from hive_alert.domain import (
    AlertType,
    DisplayAlert,
    Evaluation,
    MetricSnapshot,
    Severity,
    parse_timestamp,
)
from hive_alert.evaluation import CriticalMetricEvaluator


def severity_rank(severity: Severity) -> int:
    """Sort rank for a severity: 0 for HIGH, 1 for MEDIUM, 2 for LOW."""
    return Severity.HIGH - severity


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AlertAggregator:
    """Merges stored alert records with evaluator findings for display.

    Evaluator findings are shown at HIGH severity, whatever their own
    severity; the original one is kept in ``DisplayAlert.issue_severity``.
    Alerts are deduplicated on (beehive id, alert type), keeping the higher
    severity and, on a tie, the first one seen. Evaluator alerts are merged
    before stored ones. Activity alerts never reach the output.
    """

    def __init__(
        self,
        evaluator: CriticalMetricEvaluator,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._evaluator = evaluator
        self._clock = clock

    def evaluate_all(
        self,
        beehives: Sequence[MetricSnapshot],
        previous_by_id: Mapping[str, MetricSnapshot] | None = None,
    ) -> dict[str, Evaluation]:
        previous_by_id = previous_by_id or {}
        return {
            beehive.id: self._evaluator.evaluate(beehive, previous_by_id.get(beehive.id))
            for beehive in beehives
        }

    def aggregate(
        self,
        beehives: Sequence[MetricSnapshot],
        previous_by_id: Mapping[str, MetricSnapshot] | None = None,
        evaluations: Mapping[str, Evaluation] | None = None,
    ) -> list[DisplayAlert]:
        """Pass the result of ``evaluate_all`` as ``evaluations`` to skip re-evaluating."""
        if evaluations is None:
            evaluations = self.evaluate_all(beehives, previous_by_id)
        # naive clock values are taken as UTC, like stored record timestamps
        now = parse_timestamp(self._clock())

        critical_alerts: list[DisplayAlert] = []
        stored_alerts: list[DisplayAlert] = []
        for beehive in beehives:
            critical_alerts.extend(self._critical_metric_alerts(beehive, evaluations[beehive.id], now))
            stored_alerts.extend(self._stored_alerts(beehive))

        unique = self._deduplicate([*critical_alerts, *stored_alerts])

        # sorted() is stable, so the two passes give severity desc, then newest first
        by_time = sorted(unique, key=lambda alert: alert.timestamp, reverse=True)
        return sorted(by_time, key=lambda alert: severity_rank(alert.severity))

    @staticmethod
    def _stored_alerts(beehive: MetricSnapshot) -> list[DisplayAlert]:
        return [
            DisplayAlert(
                id=record.id,
                type=record.type,
                severity=record.severity,
                message=record.message,
                timestamp=record.timestamp,
                beehive_id=beehive.id,
                beehive_name=beehive.name,
                status=beehive.status,
                resolved=record.resolved,
            )
            for record in beehive.unresolved_alerts()
            if record.type is not AlertType.ACTIVITY
        ]

    @staticmethod
    def _critical_metric_alerts(
        beehive: MetricSnapshot, evaluation: Evaluation, now: datetime
    ) -> list[DisplayAlert]:
        if not evaluation.is_critical:
            return []

        alerts: list[DisplayAlert] = []
        for index, issue in enumerate(evaluation.messages):
            alert_type = issue.metric.alert_type
            if alert_type is AlertType.ACTIVITY:
                continue
            alerts.append(
                DisplayAlert(
                    id=f"critical-{beehive.id}-{index}",
                    type=alert_type,
                    severity=Severity.HIGH,
                    message=issue.text,
                    timestamp=now,
                    beehive_id=beehive.id,
                    beehive_name=beehive.name,
                    status=beehive.status,
                    is_critical_metric=True,
                    issue_severity=issue.severity,
                )
            )
        return alerts

    @staticmethod
    def _deduplicate(alerts: Sequence[DisplayAlert]) -> list[DisplayAlert]:
        positions: dict[tuple[str, AlertType], int] = {}
        unique: list[DisplayAlert] = []
        for alert in alerts:
            index = positions.get(alert.key)
            if index is None:
                positions[alert.key] = len(unique)
                unique.append(alert)
            elif alert.severity > unique[index].severity:
                unique[index] = alert
        return unique
