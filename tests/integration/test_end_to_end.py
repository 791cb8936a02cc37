import random
from datetime import UTC, datetime

import pytest

from hive_alert import (
    AlertAggregator,
    AlertType,
    ApiaryMonitor,
    CriticalMetricEvaluator,
    MockTelemetrySource,
    NotificationConfig,
    NotificationDispatcher,
    Severity,
)
from hive_alert.cli import main
from hive_alert.notification import EmailMessage, SendResult, SmsMessage

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)


class MockEmailTransport:
    name: str = "mock-email"

    def __init__(self) -> None:
        self.sent: list[EmailMessage] = []

    async def send(self, message: EmailMessage) -> SendResult:
        self.sent.append(message)
        return SendResult(success=True)


class MockSmsTransport:
    name: str = "mock-sms"

    def __init__(self) -> None:
        self.sent: list[SmsMessage] = []

    async def send(self, message: SmsMessage) -> SendResult:
        self.sent.append(message)
        return SendResult(success=True)


@pytest.fixture
def transports() -> tuple[MockEmailTransport, MockSmsTransport]:
    return MockEmailTransport(), MockSmsTransport()


@pytest.fixture
def monitor(transports: tuple[MockEmailTransport, MockSmsTransport]) -> ApiaryMonitor:
    email, sms = transports
    evaluator = CriticalMetricEvaluator()
    config = NotificationConfig(
        email_recipients=("keeper@example.com",),
        phone_numbers=("+16075550100",),
        alert_threshold=Severity.MEDIUM,
    )
    return ApiaryMonitor(
        MockTelemetrySource(12, rng=random.Random(42), clock=lambda: NOW),
        AlertAggregator(evaluator, clock=lambda: NOW),
        NotificationDispatcher(evaluator, email, sms, config),
        interval_seconds=0,
    )


async def test_initial_apiary_alerts(monitor: ApiaryMonitor):
    monitor.start()

    alerts = monitor.alerts

    assert [(a.beehive_id, a.type, a.severity) for a in alerts] == [
        ("hive-1", AlertType.HUMIDITY, Severity.HIGH),
        ("hive-7", AlertType.VARROA, Severity.MEDIUM),
    ]
    assert alerts[0].is_critical_metric is True
    assert alerts[0].message == "Humidity critically high: 78.50% (above 75.00%)"
    assert alerts[1].id == "alert-hive-7-varroa"


async def test_humid_hive_notified_by_both_rules(monitor, transports):
    email, sms = transports
    monitor.start()

    await monitor.select("hive-1")
    await monitor.drain()

    assert [m.subject for m in email.sent] == [
        "CRITICAL ALERT: Hive 1 requires immediate attention",
        "[HIGH] Hive 1: Humidity level too high: 78.5%",
    ]
    assert [m.body for m in sms.sent] == [
        "ALERT: Hive 1 has critical issues: Humidity critically high: 78.50% (above 75.00%)",
        "ALERT: Hive 1 - Humidity level too high: 78.5%",
    ]


async def test_varroa_hive_gets_email_but_no_sms(monitor, transports):
    email, sms = transports
    monitor.start()

    await monitor.select("hive-7")
    await monitor.drain()

    assert [m.subject for m in email.sent] == [
        "[MEDIUM] Hive 7: Warning: Varroa mite level elevated: 2.8%"
    ]
    assert sms.sent == []
    assert monitor.evaluations["hive-7"].is_critical is False


async def test_pinned_alerts_survive_ticks(monitor):
    monitor.start()

    await monitor.run(ticks=3)

    keys = {(a.beehive_id, a.type) for a in monitor.alerts}
    assert ("hive-1", AlertType.HUMIDITY) in keys
    assert ("hive-7", AlertType.VARROA) in keys


def test_cli_prints_alerts(capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("HIVE_ALERT_DELIVERY_MODE", raising=False)

    main(["--ticks", "0", "--seed", "1"])

    out = capsys.readouterr().out
    assert "2 active alert(s)" in out
    assert "[HIGH] Hive 1 (humidity, metric): Humidity critically high" in out
    assert "[MEDIUM] Hive 7 (varroa, record): Warning: Varroa mite level elevated: 2.8%" in out


def test_cli_select_prints_console_notifications(
    capsys: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.delenv("HIVE_ALERT_DELIVERY_MODE", raising=False)
    monkeypatch.setenv("HIVE_ALERT_ALERT_THRESHOLD", "medium")

    main(["--ticks", "0", "--seed", "1", "--select", "hive-7"])

    out = capsys.readouterr().out
    assert "[MEDIUM] Hive 7: Warning: Varroa mite level elevated: 2.8%" in out
    assert "[SMS]" not in out
