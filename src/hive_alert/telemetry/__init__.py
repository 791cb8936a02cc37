from hive_alert.telemetry.base import TelemetrySource
from hive_alert.telemetry.manual import ManualTelemetrySource
from hive_alert.telemetry.mock import MockTelemetrySource
from hive_alert.telemetry.statistics import compute_statistics

__all__ = [
    "TelemetrySource",
    "ManualTelemetrySource",
    "MockTelemetrySource",
    "compute_statistics",
]
