import logging

import httpx

from hive_alert.notification.transport import EmailMessage, SendResult

logger = logging.getLogger(__name__)


class MailgunEmailTransport:
    """Email transport backed by the Mailgun messages API.

    POST /v3/{domain}/messages with HTTP basic auth (user ``api``).
    Any non-2xx answer or network error is reported as a failed
    ``SendResult``; nothing is raised to the caller.
    """

    BASE_URL = "https://api.mailgun.net"
    MESSAGES_ENDPOINT = "/v3/{domain}/messages"

    def __init__(
        self,
        domain: str,
        api_key: str,
        sender: str,
        base_url: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.domain = domain
        self.api_key = api_key
        self.sender = sender
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "mailgun"

    async def send(self, message: EmailMessage) -> SendResult:
        if not message.recipients:
            logger.warning("Email %r has no recipients, not sending", message.subject)
            return SendResult(success=False, error="No recipients")

        url = f"{self.base_url}{self.MESSAGES_ENDPOINT.format(domain=self.domain)}"
        data = {
            "from": self.sender,
            "to": list(message.recipients),
            "subject": message.subject,
            "text": message.text_body or "Please view this email with an HTML-compatible email client",
            "html": message.html_body,
        }

        logger.info("Sending email to %s: %s", ", ".join(message.recipients), message.subject)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, auth=("api", self.api_key), data=data)
        except httpx.HTTPError as exc:
            logger.error("Error sending email %r: %s", message.subject, exc)
            return SendResult(success=False, error=str(exc))

        if not 200 <= response.status_code < 300:
            error = f"Mailgun returned HTTP {response.status_code}: {response.text}"
            logger.error("Failed to send email %r: %s", message.subject, error)
            return SendResult(success=False, error=error)

        message_id = self._extract_id(response)
        logger.info("Email sent successfully: %s", message_id)
        return SendResult(success=True, message_id=message_id)

    @staticmethod
    def _extract_id(response: httpx.Response) -> str | None:
        try:
            payload = response.json()
        except ValueError:
            return None
        if isinstance(payload, dict):
            return payload.get("id")
        return None
