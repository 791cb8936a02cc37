from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class EmailMessage:
    recipients: tuple[str, ...]
    subject: str
    html_body: str
    text_body: str


@dataclass(frozen=True, slots=True)
class SmsMessage:
    phone_numbers: tuple[str, ...]
    body: str


@dataclass(frozen=True, slots=True)
class SendResult:
    """Outcome of a single transport call."""

    success: bool
    message_id: str | None = None
    error: str | None = None


@runtime_checkable
class EmailTransport(Protocol):
    """Protocol for outbound email delivery."""

    @property
    def name(self) -> str:
        ...

    async def send(self, message: EmailMessage) -> SendResult:
        ...


@runtime_checkable
class SmsTransport(Protocol):
    """Protocol for outbound SMS delivery."""

    @property
    def name(self) -> str:
        ...

    async def send(self, message: SmsMessage) -> SendResult:
        ...
