"""Twilio WhatsApp sender."""

import json

import httpx
import logfire

from voicelink.adapter.whatsapp.base import HttpWhatsAppSender
from voicelink.config import TwilioWhatsAppSettings
from voicelink.util.logging import mask_phone


class TwilioWhatsAppSender(HttpWhatsAppSender):
    """Sends WhatsApp messages through Twilio's Messages API.

    Uses a content template when one is configured, otherwise a plain-text
    body.
    """

    name = "twilio"

    def __init__(self, settings: TwilioWhatsAppSettings, **kwargs) -> None:
        """Initialize Twilio sender.

        Args:
            settings: Twilio WhatsApp settings
            **kwargs: Timeout and transport, see HttpWhatsAppSender
        """
        super().__init__(**kwargs)
        self.settings = settings
        self.messages_url = (
            "https://api.twilio.com/2010-04-01/Accounts/"
            f"{settings.account_sid}/Messages.json"
        )

    @staticmethod
    def whatsapp_address(phone: str) -> str:
        """Twilio address for a phone number, always with a leading '+'."""
        digits = "".join(phone.split())
        if not digits.startswith("+"):
            digits = f"+{digits}"
        return f"whatsapp:{digits}"

    def otp_form(self, phone: str, code: str) -> dict[str, str]:
        """Build the form fields for an OTP message."""
        form = self._base_form(phone)
        if self.settings.otp_content_sid:
            form["ContentSid"] = self.settings.otp_content_sid
            form["ContentVariables"] = json.dumps(
                {self.settings.otp_content_variable: code}
            )
        else:
            form["Body"] = self.settings.otp_body.format(code=code)
        return form

    def welcome_form(self, phone: str) -> dict[str, str]:
        """Build the form fields for the welcome message."""
        form = self._base_form(phone)
        if self.settings.welcome_content_sid:
            form["ContentSid"] = self.settings.welcome_content_sid
        else:
            form["Body"] = self.settings.welcome_body
        return form

    def _base_form(self, phone: str) -> dict[str, str]:
        return {
            "To": self.whatsapp_address(phone),
            "From": self.whatsapp_address(self.settings.from_number),
        }

    async def _send(self, phone: str, form: dict[str, str]) -> None:
        result = await self._post(
            self.messages_url,
            phone,
            auth=httpx.BasicAuth(self.settings.account_sid, self.settings.auth_token),
            data=form,
        )
        logfire.info(
            "Twilio WhatsApp message accepted",
            phone=mask_phone(phone),
            sid=result.get("sid"),
            template="ContentSid" in form,
        )

    async def send_otp(self, phone: str, code: str) -> None:
        """Send a verification code."""
        await self._send(phone, self.otp_form(phone, code))

    async def send_welcome(self, phone: str) -> None:
        """Send the welcome message."""
        await self._send(phone, self.welcome_form(phone))
