"""Recording WhatsApp sender for testing."""

from dataclasses import dataclass

from voicelink.adapter.error import DeliveryError
from voicelink.domain.service.whatsapp_service import WhatsAppSender


@dataclass
class SentMessage:
    """A message recorded by MockWhatsAppSender."""

    kind: str
    phone: str
    code: str | None = None


class MockWhatsAppSender(WhatsAppSender):
    """Mock WhatsApp sender for testing.

    Records messages instead of sending them. Set ``fail`` to make every
    send raise DeliveryError.
    """

    name = "mock"

    def __init__(self) -> None:
        self.sent: list[SentMessage] = []
        self.fail = False

    def _record(self, message: SentMessage) -> None:
        if self.fail:
            raise DeliveryError("Mock delivery failure", provider=self.name)
        self.sent.append(message)

    async def send_otp(self, phone: str, code: str) -> None:
        """Record an OTP message."""
        self._record(SentMessage(kind="otp", phone=phone, code=code))

    async def send_welcome(self, phone: str) -> None:
        """Record a welcome message."""
        self._record(SentMessage(kind="welcome", phone=phone))

    def last_code(self, phone: str) -> str | None:
        """Most recent code sent to a phone number."""
        for message in reversed(self.sent):
            if message.kind == "otp" and message.phone == phone:
                return message.code
        return None
