from hive_alert.config.settings import Settings
from hive_alert.config.thresholds import (
    DEFAULT_THRESHOLDS,
    DeltaThreshold,
    LevelThreshold,
    MinimumThreshold,
    RangeThreshold,
    ThresholdTable,
)

__all__ = [
    "Settings",
    "ThresholdTable",
    "RangeThreshold",
    "LevelThreshold",
    "DeltaThreshold",
    "MinimumThreshold",
    "DEFAULT_THRESHOLDS",
]
