from itertools import count

from hive_alert.notification.transport import EmailMessage, SendResult, SmsMessage


class ConsoleEmailTransport:
    """Prints email previews instead of sending them."""

    def __init__(self, prefix: str = "[EMAIL]") -> None:
        self._prefix = prefix
        self._ids = count(1)

    @property
    def name(self) -> str:
        return "console-email"

    async def send(self, message: EmailMessage) -> SendResult:
        print(f"{self._prefix} to {', '.join(message.recipients)}: {message.subject}")
        for line in message.text_body.splitlines():
            print(f"  {line}")
        return SendResult(success=True, message_id=f"console-email-{next(self._ids)}")


class ConsoleSmsTransport:
    """Prints SMS bodies instead of sending them."""

    def __init__(self, prefix: str = "[SMS]") -> None:
        self._prefix = prefix
        self._ids = count(1)

    @property
    def name(self) -> str:
        return "console-sms"

    async def send(self, message: SmsMessage) -> SendResult:
        print(f"{self._prefix} to {', '.join(message.phone_numbers)}: {message.body}")
        return SendResult(success=True, message_id=f"console-sms-{next(self._ids)}")
