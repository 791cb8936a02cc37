import logging

from aiobotocore.session import get_session
from botocore.exceptions import BotoCoreError, ClientError

from hive_alert.notification.transport import SendResult, SmsMessage

logger = logging.getLogger(__name__)


class SnsSmsTransport:
    """SMS transport publishing one message per phone number through AWS SNS."""

    def __init__(self, region: str = "us-east-1", sender_id: str | None = None) -> None:
        self._region = region
        self._sender_id = sender_id
        self._session = get_session()

    @property
    def name(self) -> str:
        return "sns"

    async def send(self, message: SmsMessage) -> SendResult:
        if not message.phone_numbers:
            logger.warning("SMS has no phone numbers, not sending")
            return SendResult(success=False, error="No phone numbers")

        message_ids: list[str] = []
        errors: list[str] = []
        async with self._session.create_client("sns", region_name=self._region) as client:
            for phone_number in message.phone_numbers:
                try:
                    response = await client.publish(
                        PhoneNumber=phone_number,
                        Message=message.body,
                        MessageAttributes=self._attributes(),
                    )
                except (BotoCoreError, ClientError) as exc:
                    logger.error("Error sending SMS to %s: %s", phone_number, exc)
                    errors.append(f"{phone_number}: {exc}")
                    continue
                message_ids.append(response["MessageId"])

        if errors:
            return SendResult(
                success=False,
                message_id=",".join(message_ids) or None,
                error="; ".join(errors),
            )
        logger.info("SMS sent to %s", ", ".join(message.phone_numbers))
        return SendResult(success=True, message_id=",".join(message_ids))

    def _attributes(self) -> dict[str, dict[str, str]]:
        attributes = {
            "AWS.SNS.SMS.SMSType": {"DataType": "String", "StringValue": "Transactional"},
        }
        if self._sender_id:
            attributes["AWS.SNS.SMS.SenderID"] = {
                "DataType": "String",
                "StringValue": self._sender_id,
            }
        return attributes
