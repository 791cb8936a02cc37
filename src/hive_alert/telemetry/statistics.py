from collections.abc import Sequence

from hive_alert.domain import ApiaryStatistics, HiveStatus, MetricSnapshot


def compute_statistics(beehives: Sequence[MetricSnapshot]) -> ApiaryStatistics:
    total = len(beehives)
    if total == 0:
        return ApiaryStatistics()

    def average(values: list[float]) -> float:
        return round(sum(values) / total, 2)

    return ApiaryStatistics(
        total_beehives=total,
        healthy_beehives=sum(1 for b in beehives if b.status is HiveStatus.HEALTHY),
        warning_beehives=sum(1 for b in beehives if b.status is HiveStatus.WARNING),
        critical_beehives=sum(1 for b in beehives if b.status is HiveStatus.CRITICAL),
        average_temperature=average([b.metrics.temperature for b in beehives]),
        average_humidity=average([b.metrics.humidity for b in beehives]),
        average_varroa_mite_level=average([b.metrics.varroa_mite_level for b in beehives]),
    )
