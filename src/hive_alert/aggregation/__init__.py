from hive_alert.aggregation.aggregator import AlertAggregator, severity_rank

__all__ = ["AlertAggregator", "severity_rank"]
