"""Rendering of notification emails and SMS bodies."""

from collections.abc import Sequence
from datetime import UTC, datetime
from html import escape

from hive_alert.domain import AlertRecord, Evaluation, MetricSnapshot, Severity
from hive_alert.notification.transport import EmailMessage, SmsMessage

_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background-color: #FFA500; color: white; padding: 15px; border-radius: 5px 5px 0 0; }
    .header h1 { margin: 0; font-size: 24px; }
    .content { border: 1px solid #ddd; border-top: none; padding: 20px; border-radius: 0 0 5px 5px; }
    .alert-message { background-color: #FFF4E6; border-left: 4px solid #FF3B30; margin-bottom: 15px; padding: 10px; }
    .metrics { background-color: #F5F5F5; padding: 15px; border-radius: 5px; margin-top: 20px; }
    .metrics-table { width: 100%; border-collapse: collapse; }
    .metrics-table td { padding: 8px; border-bottom: 1px solid #ddd; }
    .footer { margin-top: 30px; font-size: 12px; color: #777; }
"""


def metric_rows(beehive: MetricSnapshot) -> list[tuple[str, str]]:
    """The four core metrics shown in every beehive email."""
    metrics = beehive.metrics
    return [
        ("Temperature", f"{metrics.temperature:.2f}°C"),
        ("Humidity", f"{metrics.humidity:.2f}%"),
        ("Weight", f"{metrics.weight:.2f} kg"),
        ("Entrance Activity", f"{metrics.entrance_activity:.2f}/100"),
    ]


def render_html(beehive: MetricSnapshot, messages: Sequence[str], sent_at: datetime) -> str:
    name = escape(beehive.name)
    alerts = "".join(
        f'<div class="alert-message"><p>{escape(message)}</p></div>' for message in messages
    )
    rows = "".join(
        f"<tr><td><strong>{label}:</strong></td><td>{value}</td></tr>"
        for label, value in metric_rows(beehive)
    )
    return (
        "<!DOCTYPE html>"
        '<html><head><meta charset="UTF-8">'
        f"<title>Beehive Alert: {name}</title><style>{_STYLE}</style></head>"
        "<body>"
        f'<div class="header"><h1>Beehive Alert: {name}</h1></div>'
        '<div class="content">'
        f"<p>The following conditions have been detected for <strong>{name}</strong>:</p>"
        f'<div class="alerts">{alerts}</div>'
        f'<div class="metrics"><h3>Current Metrics:</h3><table class="metrics-table">{rows}</table></div>'
        "<p><strong>Please take immediate action if needed.</strong></p>"
        '<div class="footer">'
        "<p>This is an automated alert from the hive-alert beehive monitoring system.</p>"
        f"<p>Time: {sent_at.isoformat(timespec='seconds')}</p>"
        "</div></div></body></html>"
    )


def render_text(subject: str, beehive: MetricSnapshot, messages: Sequence[str]) -> str:
    lines = [f"Alert: {subject}", "", f"{beehive.name} requires attention.", *messages, ""]
    lines.extend(f"{label}: {value}" for label, value in metric_rows(beehive))
    return "\n".join(lines)


def critical_email(
    beehive: MetricSnapshot,
    evaluation: Evaluation,
    recipients: Sequence[str],
    sent_at: datetime | None = None,
) -> EmailMessage:
    subject = f"CRITICAL ALERT: {beehive.name} requires immediate attention"
    messages = [
        f"Critical alerts detected for {beehive.name} at {beehive.location}:",
        *evaluation.texts,
    ]
    return EmailMessage(
        recipients=tuple(recipients),
        subject=subject,
        html_body=render_html(beehive, messages, sent_at or datetime.now(UTC)),
        text_body=render_text(subject, beehive, messages),
    )


def critical_sms(
    beehive: MetricSnapshot, evaluation: Evaluation, phone_numbers: Sequence[str]
) -> SmsMessage:
    critical = evaluation.critical_messages
    first = critical[0] if critical else evaluation.messages[0]
    remaining = len(evaluation.messages) - 1
    body = f"ALERT: {beehive.name} has critical issues: {first.text}"
    if remaining > 0:
        body += f" and {remaining} more issues"
    return SmsMessage(phone_numbers=tuple(phone_numbers), body=body)


def stored_alert_email(
    beehive: MetricSnapshot,
    alert: AlertRecord,
    recipients: Sequence[str],
    sent_at: datetime | None = None,
) -> EmailMessage:
    subject = f"[{alert.severity.name}] {beehive.name}: {alert.message}"
    messages = [f"Alert type: {alert.type.value}", alert.message]
    return EmailMessage(
        recipients=tuple(recipients),
        subject=subject,
        html_body=render_html(beehive, messages, sent_at or datetime.now(UTC)),
        text_body=render_text(subject, beehive, messages),
    )


def stored_alert_sms(
    beehive: MetricSnapshot, alert: AlertRecord, phone_numbers: Sequence[str]
) -> SmsMessage:
    return SmsMessage(
        phone_numbers=tuple(phone_numbers),
        body=f"ALERT: {beehive.name} - {alert.message}",
    )


def is_sms_worthy(alert: AlertRecord) -> bool:
    return alert.severity is Severity.HIGH
