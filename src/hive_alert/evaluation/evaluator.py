from hive_alert.config.thresholds import DEFAULT_THRESHOLDS, ThresholdTable
from hive_alert.domain import Evaluation, IssueMessage, MetricSnapshot
from hive_alert.evaluation.base import MetricRule
from hive_alert.evaluation.rules import (
    EntranceActivityRule,
    HumidityRule,
    TemperatureRule,
    VarroaRule,
    WeightDropRule,
)


class CriticalMetricEvaluator:
    """Runs the metric rules in fixed order and combines their findings.

    Order: temperature, humidity, varroa, weight drop, then entrance activity
    when ``enable_activity_checks`` is set. ``is_critical`` is the OR of every
    critical finding.
    """

    def __init__(
        self,
        thresholds: ThresholdTable = DEFAULT_THRESHOLDS,
        enable_activity_checks: bool = False,
    ) -> None:
        self._thresholds = thresholds
        self._enable_activity_checks = enable_activity_checks
        rules: list[MetricRule] = [
            TemperatureRule(thresholds.temperature),
            HumidityRule(thresholds.humidity),
            VarroaRule(thresholds.varroa),
            WeightDropRule(thresholds.weight),
        ]
        if enable_activity_checks:
            rules.append(EntranceActivityRule(thresholds.entrance_activity))
        self._rules: tuple[MetricRule, ...] = tuple(rules)

    @property
    def thresholds(self) -> ThresholdTable:
        return self._thresholds

    @property
    def activity_checks_enabled(self) -> bool:
        return self._enable_activity_checks

    @property
    def rules(self) -> tuple[MetricRule, ...]:
        return self._rules

    def evaluate(self, current: MetricSnapshot, previous: MetricSnapshot | None = None) -> Evaluation:
        messages: list[IssueMessage] = []
        is_critical = False
        for rule in self._rules:
            issue = rule.check(current, previous)
            if issue is None:
                continue
            messages.append(issue)
            is_critical = is_critical or issue.is_critical
        return Evaluation(is_critical=is_critical, messages=tuple(messages))


def evaluate(
    current: MetricSnapshot,
    previous: MetricSnapshot | None,
    thresholds: ThresholdTable = DEFAULT_THRESHOLDS,
    *,
    enable_activity_checks: bool = False,
) -> Evaluation:
    evaluator = CriticalMetricEvaluator(thresholds, enable_activity_checks=enable_activity_checks)
    return evaluator.evaluate(current, previous)
