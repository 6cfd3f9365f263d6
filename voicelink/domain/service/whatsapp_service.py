"""WhatsApp messaging domain service."""

from abc import ABC, abstractmethod

import logfire

from voicelink.adapter.error import DeliveryError
from voicelink.util.logging import mask_phone

from .base import Service


class WhatsAppSender(ABC):
    """Sends VoiceLink messages over WhatsApp.

    Implementations raise DeliveryError when the upstream API rejects a
    message or does not answer in time; they never swallow failures.
    """

    name: str

    @abstractmethod
    async def send_otp(self, phone: str, code: str) -> None:
        """Send a verification code.

        Args:
            phone: Recipient phone number (E.164)
            code: Six-digit code

        Raises:
            DeliveryError: If the message is not accepted
        """
        pass

    @abstractmethod
    async def send_welcome(self, phone: str) -> None:
        """Send the welcome message after verification.

        Args:
            phone: Recipient phone number (E.164)

        Raises:
            DeliveryError: If the message is not accepted
        """
        pass


class WhatsAppService(Service):
    """Domain service wrapping the configured WhatsApp sender."""

    def __init__(self, sender: WhatsAppSender) -> None:
        """Initialize WhatsApp service.

        Args:
            sender: Active WhatsApp sender
        """
        self.sender = sender

    async def send_otp(self, phone: str, code: str) -> None:
        """Deliver a verification code.

        Raises:
            DeliveryError: If delivery fails
        """
        with logfire.span(
            "whatsapp_service.send_otp",
            sender=self.sender.name,
            phone=mask_phone(phone),
        ):
            await self.sender.send_otp(phone, code)
            logfire.info("OTP delivered", sender=self.sender.name, phone=mask_phone(phone))

    async def try_send_otp(self, phone: str, code: str) -> bool:
        """Deliver a verification code, logging instead of raising on failure.

        Returns:
            True if the message was accepted
        """
        try:
            await self.send_otp(phone, code)
            return True
        except DeliveryError as e:
            logfire.warn(
                "OTP delivery failed",
                sender=self.sender.name,
                phone=mask_phone(phone),
                error=str(e),
            )
            return False

    async def try_send_welcome(self, phone: str) -> bool:
        """Send the welcome message, logging instead of raising on failure.

        Returns:
            True if the message was accepted
        """
        with logfire.span(
            "whatsapp_service.send_welcome",
            sender=self.sender.name,
            phone=mask_phone(phone),
        ):
            try:
                await self.sender.send_welcome(phone)
            except DeliveryError as e:
                logfire.warn(
                    "Welcome message delivery failed",
                    sender=self.sender.name,
                    phone=mask_phone(phone),
                    error=str(e),
                )
                return False
            logfire.info("Welcome message delivered", phone=mask_phone(phone))
            return True
