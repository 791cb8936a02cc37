import logging
from dataclasses import dataclass, field
from enum import StrEnum

import httpx
from botocore.exceptions import BotoCoreError, ClientError

from hive_alert.domain import MetricSnapshot, NotificationConfig
from hive_alert.evaluation import CriticalMetricEvaluator
from hive_alert.exceptions import ConfigurationError, TransportError
from hive_alert.notification import formatting
from hive_alert.notification.transport import (
    EmailMessage,
    EmailTransport,
    SendResult,
    SmsMessage,
    SmsTransport,
)

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (TransportError, httpx.HTTPError, BotoCoreError, ClientError, OSError)


class DispatchRule(StrEnum):
    CRITICAL_METRICS = "critical_metrics"
    STORED_ALERT = "stored_alert"


class Channel(StrEnum):
    EMAIL = "email"
    SMS = "sms"


@dataclass(frozen=True, slots=True)
class Delivery:
    rule: DispatchRule
    channel: Channel
    summary: str
    result: SendResult
    alert_id: str | None = None


@dataclass(slots=True)
class DispatchReport:
    beehive_id: str
    deliveries: list[Delivery] = field(default_factory=list)

    @property
    def delivered(self) -> list[Delivery]:
        return [d for d in self.deliveries if d.result.success]

    @property
    def failed(self) -> list[Delivery]:
        return [d for d in self.deliveries if not d.result.success]

    def by_channel(self, channel: Channel) -> list[Delivery]:
        return [d for d in self.deliveries if d.channel is channel]


class NotificationDispatcher:
    """Routes evaluation results and stored alerts to email and SMS.

    Two independent rules run for each beehive:

    - critical metrics: when the evaluation is critical, one email with every
      finding and one short SMS citing the first critical finding.
    - stored alerts: every unresolved record at or above the configured
      threshold gets an email; only HIGH records also get an SMS.

    The rules do not deduplicate against each other. A failed delivery is
    logged and recorded in the report, and never stops the remaining ones.

    ``config.enable_activity_checks`` must match the evaluator, otherwise
    ``ConfigurationError`` is raised.
    """

    def __init__(
        self,
        evaluator: CriticalMetricEvaluator,
        email_transport: EmailTransport,
        sms_transport: SmsTransport,
        config: NotificationConfig,
    ) -> None:
        if evaluator.activity_checks_enabled != config.enable_activity_checks:
            raise ConfigurationError(
                f"Evaluator activity checks ({evaluator.activity_checks_enabled}) do not match "
                f"enable_activity_checks={config.enable_activity_checks}"
            )
        self._evaluator = evaluator
        self._email = email_transport
        self._sms = sms_transport
        self._config = config

    @property
    def config(self) -> NotificationConfig:
        return self._config

    async def dispatch(
        self, beehive: MetricSnapshot, previous: MetricSnapshot | None = None
    ) -> DispatchReport:
        report = DispatchReport(beehive_id=beehive.id)
        await self._dispatch_critical_metrics(beehive, previous, report)
        await self._dispatch_stored_alerts(beehive, report)
        return report

    async def _dispatch_critical_metrics(
        self,
        beehive: MetricSnapshot,
        previous: MetricSnapshot | None,
        report: DispatchReport,
    ) -> None:
        evaluation = self._evaluator.evaluate(beehive, previous)
        if not evaluation.is_critical:
            return

        if self._config.enable_email:
            email = formatting.critical_email(beehive, evaluation, self._config.email_recipients)
            result = await self._send_email(email)
            report.deliveries.append(
                Delivery(DispatchRule.CRITICAL_METRICS, Channel.EMAIL, email.subject, result)
            )

        if self._config.enable_sms:
            sms = formatting.critical_sms(beehive, evaluation, self._config.phone_numbers)
            result = await self._send_sms(sms)
            report.deliveries.append(
                Delivery(DispatchRule.CRITICAL_METRICS, Channel.SMS, sms.body, result)
            )

    async def _dispatch_stored_alerts(self, beehive: MetricSnapshot, report: DispatchReport) -> None:
        alerts = [
            alert
            for alert in beehive.unresolved_alerts()
            if alert.severity >= self._config.alert_threshold
        ]
        for alert in alerts:
            if self._config.enable_email:
                email = formatting.stored_alert_email(beehive, alert, self._config.email_recipients)
                result = await self._send_email(email)
                report.deliveries.append(
                    Delivery(DispatchRule.STORED_ALERT, Channel.EMAIL, email.subject, result, alert.id)
                )

            if self._config.enable_sms and formatting.is_sms_worthy(alert):
                sms = formatting.stored_alert_sms(beehive, alert, self._config.phone_numbers)
                result = await self._send_sms(sms)
                report.deliveries.append(
                    Delivery(DispatchRule.STORED_ALERT, Channel.SMS, sms.body, result, alert.id)
                )

    async def _send_email(self, message: EmailMessage) -> SendResult:
        try:
            result = await self._email.send(message)
        except _TRANSPORT_ERRORS as exc:
            logger.error("Email transport %s raised: %s", self._email.name, exc)
            return SendResult(success=False, error=str(exc))
        if not result.success:
            logger.warning("Email %r not delivered: %s", message.subject, result.error)
        return result

    async def _send_sms(self, message: SmsMessage) -> SendResult:
        try:
            result = await self._sms.send(message)
        except _TRANSPORT_ERRORS as exc:
            logger.error("SMS transport %s raised: %s", self._sms.name, exc)
            return SendResult(success=False, error=str(exc))
        if not result.success:
            logger.warning("SMS %r not delivered: %s", message.body, result.error)
        return result
