from hive_alert.config.settings import Settings
from hive_alert.exceptions import ConfigurationError
from hive_alert.notification.console import ConsoleEmailTransport, ConsoleSmsTransport
from hive_alert.notification.mailgun import MailgunEmailTransport
from hive_alert.notification.sns import SnsSmsTransport
from hive_alert.notification.transport import EmailTransport, SmsTransport


def build_transports(settings: Settings) -> tuple[EmailTransport, SmsTransport]:
    """Pick console or live transports according to ``settings.delivery_mode``."""
    if settings.delivery_mode == "console":
        return ConsoleEmailTransport(), ConsoleSmsTransport()

    if settings.enable_email and not (settings.mailgun_domain and settings.mailgun_api_key):
        raise ConfigurationError(
            "Live email delivery needs HIVE_ALERT_MAILGUN_DOMAIN and HIVE_ALERT_MAILGUN_API_KEY"
        )

    email = MailgunEmailTransport(
        domain=settings.mailgun_domain,
        api_key=settings.mailgun_api_key,
        sender=settings.mail_sender,
        base_url=settings.mailgun_base_url,
    )
    sms = SnsSmsTransport(region=settings.sns_region)
    return email, sms
