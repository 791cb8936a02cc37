"""Application configuration loaded from environment variables."""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hive_alert.domain import NotificationConfig, Severity


class Settings(BaseSettings):
    app_name: str = "hive-alert"
    log_level: str = "INFO"
    poll_interval_seconds: float = 5.0

    # Notification routing
    enable_email: bool = True
    enable_sms: bool = True
    email_recipients: list[str] = Field(default_factory=list)
    phone_numbers: list[str] = Field(default_factory=list)
    alert_threshold: Literal["low", "medium", "high"] = "medium"
    enable_activity_checks: bool = False

    # "console" prints notifications, "live" sends them through Mailgun and SNS
    delivery_mode: Literal["console", "live"] = "console"

    # Mailgun
    mailgun_domain: str = ""
    mailgun_api_key: str = ""
    mailgun_base_url: str = "https://api.mailgun.net"
    mail_sender: str = "Hive Alert <alerts@hive-alert.local>"

    # AWS SNS
    sns_region: str = "us-east-1"

    model_config = SettingsConfigDict(env_prefix="HIVE_ALERT_")

    @field_validator("alert_threshold", mode="before")
    @classmethod
    def _lower_threshold(cls, value: object) -> object:
        return value.lower() if isinstance(value, str) else value

    def notification_config(self) -> NotificationConfig:
        return NotificationConfig(
            enable_email=self.enable_email,
            enable_sms=self.enable_sms,
            email_recipients=tuple(self.email_recipients),
            phone_numbers=tuple(self.phone_numbers),
            alert_threshold=Severity.parse(self.alert_threshold),
            enable_activity_checks=self.enable_activity_checks,
        )
