from hive_alert.notification.console import ConsoleEmailTransport, ConsoleSmsTransport
from hive_alert.notification.dispatcher import (
    Channel,
    Delivery,
    DispatchReport,
    DispatchRule,
    NotificationDispatcher,
)
from hive_alert.notification.factory import build_transports
from hive_alert.notification.mailgun import MailgunEmailTransport
from hive_alert.notification.sns import SnsSmsTransport
from hive_alert.notification.transport import (
    EmailMessage,
    EmailTransport,
    SendResult,
    SmsMessage,
    SmsTransport,
)

__all__ = [
    "EmailMessage",
    "SmsMessage",
    "SendResult",
    "EmailTransport",
    "SmsTransport",
    "ConsoleEmailTransport",
    "ConsoleSmsTransport",
    "MailgunEmailTransport",
    "SnsSmsTransport",
    "NotificationDispatcher",
    "DispatchReport",
    "DispatchRule",
    "Delivery",
    "Channel",
    "build_transports",
]
