__version__ = "0.1.0"

from hive_alert.aggregation import AlertAggregator
from hive_alert.config import DEFAULT_THRESHOLDS, Settings, ThresholdTable
from hive_alert.core import ApiaryMonitor
from hive_alert.domain import (
    AlertRecord,
    AlertType,
    ApiaryData,
    DisplayAlert,
    Evaluation,
    HiveMetrics,
    HiveStatus,
    IssueMessage,
    IssueSeverity,
    MetricKind,
    MetricSnapshot,
    NotificationConfig,
    Severity,
)
from hive_alert.evaluation import CriticalMetricEvaluator, evaluate
from hive_alert.notification import (
    ConsoleEmailTransport,
    ConsoleSmsTransport,
    EmailTransport,
    NotificationDispatcher,
    SmsTransport,
)
from hive_alert.telemetry import ManualTelemetrySource, MockTelemetrySource, TelemetrySource

__all__ = [
    "__version__",
    "ApiaryMonitor",
    "AlertAggregator",
    "CriticalMetricEvaluator",
    "evaluate",
    "NotificationDispatcher",
    "Settings",
    "ThresholdTable",
    "DEFAULT_THRESHOLDS",
    "AlertRecord",
    "AlertType",
    "ApiaryData",
    "DisplayAlert",
    "Evaluation",
    "HiveMetrics",
    "HiveStatus",
    "IssueMessage",
    "IssueSeverity",
    "MetricKind",
    "MetricSnapshot",
    "NotificationConfig",
    "Severity",
    "EmailTransport",
    "SmsTransport",
    "ConsoleEmailTransport",
    "ConsoleSmsTransport",
    "TelemetrySource",
    "ManualTelemetrySource",
    "MockTelemetrySource",
]
