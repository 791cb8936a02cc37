from hive_alert.evaluation.base import MetricRule
from hive_alert.evaluation.evaluator import CriticalMetricEvaluator, evaluate
from hive_alert.evaluation.rules import (
    EntranceActivityRule,
    HumidityRule,
    RangeRule,
    TemperatureRule,
    VarroaRule,
    WeightDropRule,
)

__all__ = [
    "MetricRule",
    "CriticalMetricEvaluator",
    "evaluate",
    "RangeRule",
    "TemperatureRule",
    "HumidityRule",
    "VarroaRule",
    "WeightDropRule",
    "EntranceActivityRule",
]
