"""Command line entry point running the apiary monitor on synthetic telemetry."""

import argparse
import asyncio
import logging
import random

from hive_alert.aggregation import AlertAggregator
from hive_alert.config import DEFAULT_THRESHOLDS, Settings
from hive_alert.core import ApiaryMonitor
from hive_alert.domain import DisplayAlert
from hive_alert.evaluation import CriticalMetricEvaluator
from hive_alert.notification import NotificationDispatcher, build_transports
from hive_alert.telemetry import MockTelemetrySource

logger = logging.getLogger(__name__)


def _print_alerts(alerts: list[DisplayAlert]) -> None:
    print(f"{len(alerts)} active alert(s)")
    for alert in alerts:
        origin = "metric" if alert.is_critical_metric else "record"
        print(f"  [{alert.severity.name}] {alert.beehive_name} ({alert.type.value}, {origin}): {alert.message}")


async def _run(monitor: ApiaryMonitor, ticks: int, select: str | None) -> None:
    monitor.start()
    _print_alerts(monitor.alerts)
    if select:
        await monitor.select(select)
    for _ in range(ticks):
        await asyncio.sleep(monitor.interval_seconds)
        _print_alerts(await monitor.tick())
    await monitor.drain()


def main(argv: list[str] | None = None) -> None:
    p = argparse.ArgumentParser(description="Beehive alert monitor (synthetic telemetry)")
    p.add_argument("--ticks", type=int, default=3, help="number of refresh ticks to run")
    p.add_argument("--interval", type=float, default=None, help="seconds between ticks")
    p.add_argument("--select", default=None, help="beehive id to dispatch notifications for")
    p.add_argument("--seed", type=int, default=None, help="seed for the synthetic telemetry")
    p.add_argument("--hives", type=int, default=12)
    p.add_argument("--live", action="store_true", help="send through Mailgun and SNS")
    args = p.parse_args(argv)

    settings = Settings()
    if args.live:
        settings = settings.model_copy(update={"delivery_mode": "live"})

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    config = settings.notification_config()
    evaluator = CriticalMetricEvaluator(
        DEFAULT_THRESHOLDS, enable_activity_checks=config.enable_activity_checks
    )
    email, sms = build_transports(settings)
    monitor = ApiaryMonitor(
        source=MockTelemetrySource(args.hives, rng=random.Random(args.seed)),
        aggregator=AlertAggregator(evaluator),
        dispatcher=NotificationDispatcher(evaluator, email, sms, config),
        interval_seconds=args.interval if args.interval is not None else settings.poll_interval_seconds,
    )
    logger.info("Starting %s in %s mode", settings.app_name, settings.delivery_mode)
    asyncio.run(_run(monitor, args.ticks, args.select))
