from datetime import UTC, datetime

import httpx
import pytest
from botocore.exceptions import ClientError

from hive_alert.config import DEFAULT_THRESHOLDS, RangeThreshold
from hive_alert.domain import (
    AlertRecord,
    AlertType,
    HiveMetrics,
    MetricSnapshot,
    NotificationConfig,
    Severity,
)
from hive_alert.evaluation import CriticalMetricEvaluator
from hive_alert.exceptions import ConfigurationError, TransportError
from hive_alert.notification import (
    Channel,
    DispatchRule,
    EmailMessage,
    EmailTransport,
    NotificationDispatcher,
    SendResult,
    SmsMessage,
    SmsTransport,
)

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)


class RecordingEmailTransport:
    name: str = "recording-email"

    def __init__(self, results: list[SendResult] | None = None) -> None:
        self.sent: list[EmailMessage] = []
        self._results = list(results or [])

    async def send(self, message: EmailMessage) -> SendResult:
        self.sent.append(message)
        if self._results:
            return self._results.pop(0)
        return SendResult(success=True, message_id=f"email-{len(self.sent)}")


class RecordingSmsTransport:
    name: str = "recording-sms"

    def __init__(self) -> None:
        self.sent: list[SmsMessage] = []

    async def send(self, message: SmsMessage) -> SendResult:
        self.sent.append(message)
        return SendResult(success=True, message_id=f"sms-{len(self.sent)}")


class RaisingEmailTransport:
    name: str = "raising-email"

    def __init__(self, exc: Exception) -> None:
        self._exc = exc
        self.calls = 0

    async def send(self, message: EmailMessage) -> SendResult:
        self.calls += 1
        raise self._exc


def _hive(
    beehive_id: str = "hive-1",
    alerts: tuple[AlertRecord, ...] = (),
    **metrics: float,
) -> MetricSnapshot:
    values = dict(
        temperature=34.0,
        humidity=60.0,
        weight=30.0,
        entrance_activity=70.0,
        varroa_mite_level=1.0,
        queen_activity=50.0,
        population_estimate=30000,
    )
    values.update(metrics)
    return MetricSnapshot(
        id=beehive_id,
        name=f"Hive {beehive_id.split('-')[-1]}",
        location="Cornell Apiary",
        metrics=HiveMetrics(**values),
        alerts=alerts,
    )


def _record(alert_id: str, alert_type: AlertType, severity: Severity, resolved: bool = False) -> AlertRecord:
    return AlertRecord(alert_id, alert_type, severity, f"{alert_type.value} alert", NOW, resolved)


def _config(**overrides: object) -> NotificationConfig:
    values: dict[str, object] = dict(
        enable_email=True,
        enable_sms=True,
        email_recipients=("keeper@example.com",),
        phone_numbers=("+16075550100",),
        alert_threshold=Severity.MEDIUM,
    )
    values.update(overrides)
    return NotificationConfig(**values)  # type: ignore[arg-type]


def _dispatcher(
    config: NotificationConfig,
    email: EmailTransport | None = None,
    sms: SmsTransport | None = None,
    evaluator: CriticalMetricEvaluator | None = None,
) -> NotificationDispatcher:
    return NotificationDispatcher(
        evaluator or CriticalMetricEvaluator(),
        email or RecordingEmailTransport(),
        sms or RecordingSmsTransport(),
        config,
    )


def test_recording_transports_implement_protocols() -> None:
    assert isinstance(RecordingEmailTransport(), EmailTransport)
    assert isinstance(RecordingSmsTransport(), SmsTransport)


class TestCriticalMetricRule:
    async def test_critical_humidity_sends_one_email(self) -> None:
        thresholds = DEFAULT_THRESHOLDS.with_overrides(
            humidity=RangeThreshold(ideal_min=50, ideal_max=60, critical_min=35, critical_max=75, unit="%")
        )
        email = RecordingEmailTransport()
        sms = RecordingSmsTransport()
        dispatcher = _dispatcher(
            _config(enable_sms=False), email, sms, CriticalMetricEvaluator(thresholds)
        )

        report = await dispatcher.dispatch(_hive(humidity=78.5))

        assert len(email.sent) == 1
        assert "Hive 1" in email.sent[0].subject
        assert "Humidity critically high: 78.50% (above 75.00%)" in email.sent[0].text_body
        assert sms.sent == []
        assert [d.rule for d in report.deliveries] == [DispatchRule.CRITICAL_METRICS]

    async def test_critical_sms_cites_first_issue(self) -> None:
        sms = RecordingSmsTransport()
        dispatcher = _dispatcher(_config(enable_email=False), sms=sms)

        await dispatcher.dispatch(_hive(temperature=29.0, humidity=80.0))

        assert len(sms.sent) == 1
        assert sms.sent[0].phone_numbers == ("+16075550100",)
        assert sms.sent[0].body == (
            "ALERT: Hive 1 has critical issues: Temperature critically low: 29.00°C "
            "(below 30.00°C) and 1 more issues"
        )

    async def test_non_critical_evaluation_sends_nothing(self) -> None:
        email = RecordingEmailTransport()
        sms = RecordingSmsTransport()
        dispatcher = _dispatcher(_config(), email, sms)

        report = await dispatcher.dispatch(_hive("hive-7", varroa_mite_level=2.8))

        assert email.sent == []
        assert sms.sent == []
        assert report.deliveries == []

    async def test_previous_snapshot_used_for_weight_drop(self) -> None:
        email = RecordingEmailTransport()
        dispatcher = _dispatcher(_config(enable_sms=False), email)

        await dispatcher.dispatch(_hive(weight=28.0), previous=_hive(weight=30.0))

        assert len(email.sent) == 1
        assert "Weight critically decreased" in email.sent[0].text_body

    async def test_channels_disabled(self) -> None:
        email = RecordingEmailTransport()
        sms = RecordingSmsTransport()
        dispatcher = _dispatcher(_config(enable_email=False, enable_sms=False), email, sms)

        report = await dispatcher.dispatch(_hive(humidity=90.0))

        assert email.sent == [] and sms.sent == []
        assert report.deliveries == []


class TestStoredAlertRule:
    async def test_medium_varroa_record_emails_but_never_texts(self) -> None:
        email = RecordingEmailTransport()
        sms = RecordingSmsTransport()
        record = _record("alert-hive-7-varroa", AlertType.VARROA, Severity.MEDIUM)
        dispatcher = _dispatcher(_config(), email, sms)

        report = await dispatcher.dispatch(_hive("hive-7", alerts=(record,), varroa_mite_level=2.8))

        assert sms.sent == []
        assert len(email.sent) == 1
        assert email.sent[0].subject == "[MEDIUM] Hive 7: varroa alert"
        assert report.deliveries[0].alert_id == "alert-hive-7-varroa"

    async def test_high_record_emails_and_texts(self) -> None:
        email = RecordingEmailTransport()
        sms = RecordingSmsTransport()
        record = _record("r1", AlertType.WEIGHT, Severity.HIGH)
        dispatcher = _dispatcher(_config(), email, sms)

        report = await dispatcher.dispatch(_hive(alerts=(record,)))

        assert len(email.sent) == 1
        assert [m.body for m in sms.sent] == ["ALERT: Hive 1 - weight alert"]
        assert [d.channel for d in report.deliveries] == [Channel.EMAIL, Channel.SMS]

    async def test_threshold_filters_records(self) -> None:
        email = RecordingEmailTransport()
        records = (
            _record("low", AlertType.OTHER, Severity.LOW),
            _record("medium", AlertType.VARROA, Severity.MEDIUM),
            _record("high", AlertType.WEIGHT, Severity.HIGH),
        )
        dispatcher = _dispatcher(_config(enable_sms=False, alert_threshold=Severity.HIGH), email)

        report = await dispatcher.dispatch(_hive(alerts=records))

        assert [d.alert_id for d in report.deliveries] == ["high"]

    async def test_low_threshold_includes_all_records(self) -> None:
        email = RecordingEmailTransport()
        records = (
            _record("low", AlertType.OTHER, Severity.LOW),
            _record("medium", AlertType.VARROA, Severity.MEDIUM),
        )
        dispatcher = _dispatcher(_config(enable_sms=False, alert_threshold=Severity.LOW), email)

        await dispatcher.dispatch(_hive(alerts=records))

        assert len(email.sent) == 2

    async def test_resolved_records_skipped(self) -> None:
        email = RecordingEmailTransport()
        record = _record("done", AlertType.WEIGHT, Severity.HIGH, resolved=True)
        dispatcher = _dispatcher(_config(), email)

        report = await dispatcher.dispatch(_hive(alerts=(record,)))

        assert report.deliveries == []


class TestBothRules:
    async def test_same_condition_notified_by_both_rules(self) -> None:
        email = RecordingEmailTransport()
        sms = RecordingSmsTransport()
        record = _record("alert-hive-1-humidity", AlertType.HUMIDITY, Severity.HIGH)
        dispatcher = _dispatcher(_config(), email, sms)

        report = await dispatcher.dispatch(_hive(alerts=(record,), humidity=78.5))

        assert len(email.sent) == 2
        assert len(sms.sent) == 2
        assert [d.rule for d in report.deliveries] == [
            DispatchRule.CRITICAL_METRICS,
            DispatchRule.CRITICAL_METRICS,
            DispatchRule.STORED_ALERT,
            DispatchRule.STORED_ALERT,
        ]


class TestTransportFailures:
    async def test_failed_result_does_not_stop_remaining_alerts(self) -> None:
        email = RecordingEmailTransport(results=[SendResult(success=False, error="HTTP 500")])
        records = (
            _record("first", AlertType.VARROA, Severity.MEDIUM),
            _record("second", AlertType.OTHER, Severity.MEDIUM),
        )
        dispatcher = _dispatcher(_config(enable_sms=False), email)

        report = await dispatcher.dispatch(_hive(alerts=records))

        assert len(email.sent) == 2
        assert [d.alert_id for d in report.failed] == ["first"]
        assert [d.alert_id for d in report.delivered] == ["second"]

    @pytest.mark.parametrize(
        "exc",
        [
            TransportError("smtp down", status_code=503),
            httpx.ConnectError("connection refused"),
            OSError("network unreachable"),
        ],
    )
    async def test_raised_transport_errors_are_caught(self, exc: Exception) -> None:
        email = RaisingEmailTransport(exc)
        sms = RecordingSmsTransport()
        dispatcher = _dispatcher(_config(), email, sms)

        report = await dispatcher.dispatch(_hive(humidity=90.0))

        assert email.calls == 1
        assert len(sms.sent) == 1
        assert len(report.failed) == 1
        assert report.failed[0].channel is Channel.EMAIL
        assert report.by_channel(Channel.SMS)[0].result.success is True


class TestActivityCheckConfig:
    def test_mismatched_activity_flag_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="activity"):
            _dispatcher(_config(enable_activity_checks=True), evaluator=CriticalMetricEvaluator())

    def test_matching_activity_flag_accepted(self) -> None:
        dispatcher = _dispatcher(
            _config(enable_activity_checks=True),
            evaluator=CriticalMetricEvaluator(enable_activity_checks=True),
        )
        assert dispatcher.config.enable_activity_checks is True

    async def test_enabled_activity_checks_reach_dispatch(self) -> None:
        email = RecordingEmailTransport()
        dispatcher = _dispatcher(
            _config(enable_sms=False, enable_activity_checks=True),
            email,
            evaluator=CriticalMetricEvaluator(enable_activity_checks=True),
        )

        await dispatcher.dispatch(_hive(entrance_activity=5.0))

        assert len(email.sent) == 1
        assert "Entrance activity critically low: 5.00 (below 20.00)" in email.sent[0].text_body


class RaisingSmsTransport:
    name: str = "raising-sms"

    async def send(self, message: SmsMessage) -> SendResult:
        raise ClientError({"Error": {"Code": "Throttling", "Message": "Rate exceeded"}}, "Publish")


async def test_sns_client_error_is_recorded_as_failed_sms() -> None:
    email = RecordingEmailTransport()
    dispatcher = _dispatcher(_config(), email, RaisingSmsTransport())  # type: ignore[arg-type]

    report = await dispatcher.dispatch(_hive(humidity=90.0))

    assert len(email.sent) == 1
    failed = report.by_channel(Channel.SMS)
    assert len(failed) == 1
    assert failed[0].result.success is False
    assert "Throttling" in (failed[0].result.error or "")
