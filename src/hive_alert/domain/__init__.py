"""Domain models for beehive telemetry and alerting."""

from hive_alert.domain.models import (
    AlertRecord,
    AlertType,
    ApiaryData,
    ApiaryStatistics,
    Coordinates,
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
    parse_timestamp,
)

__all__ = [
    "AlertRecord",
    "AlertType",
    "ApiaryData",
    "ApiaryStatistics",
    "Coordinates",
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
    "parse_timestamp",
]
