from hive_alert.core.monitor import ApiaryMonitor

__all__ = ["ApiaryMonitor"]
