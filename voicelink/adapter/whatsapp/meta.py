"""Meta WhatsApp Cloud API sender."""

import httpx
import logfire

from voicelink.adapter.whatsapp.base import HttpWhatsAppSender
from voicelink.config import MetaWhatsAppSettings
from voicelink.util.logging import mask_phone


class MetaWhatsAppSender(HttpWhatsAppSender):
    """Sends template messages through the WhatsApp Cloud API.

    Business-initiated messages must use pre-approved templates; the OTP
    template takes the code as its single body parameter.
    """

    name = "meta"

    def __init__(self, settings: MetaWhatsAppSettings, **kwargs) -> None:
        """Initialize Meta sender.

        Args:
            settings: Meta WhatsApp settings
            **kwargs: Timeout and transport, see HttpWhatsAppSender
        """
        super().__init__(**kwargs)
        self.settings = settings
        self.messages_url = (
            f"https://graph.facebook.com/{settings.api_version}"
            f"/{settings.phone_number_id}/messages"
        )

    @staticmethod
    def normalize_phone(phone: str) -> str:
        """Cloud API expects digits only, without the leading '+'."""
        return "".join(phone.split()).removeprefix("+")

    def _error_message(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        error = body.get("error") if isinstance(body, dict) else None
        if not isinstance(error, dict):
            return f"HTTP {response.status_code}"
        return error.get("message") or f"HTTP {response.status_code}"

    def template_payload(
        self, phone: str, template: str, parameters: list[str]
    ) -> dict:
        """Build a template message payload."""
        payload = {
            "messaging_product": "whatsapp",
            "to": self.normalize_phone(phone),
            "type": "template",
            "template": {
                "name": template,
                "language": {"code": self.settings.language_code},
            },
        }
        if parameters:
            payload["template"]["components"] = [
                {
                    "type": "body",
                    "parameters": [{"type": "text", "text": p} for p in parameters],
                }
            ]
        return payload

    async def _send_template(
        self, phone: str, template: str, parameters: list[str]
    ) -> None:
        result = await self._post(
            self.messages_url,
            phone,
            headers={"Authorization": f"Bearer {self.settings.access_token}"},
            json=self.template_payload(phone, template, parameters),
        )
        message_id = (result.get("messages") or [{}])[0].get("id")
        logfire.info(
            "Meta WhatsApp message accepted",
            template=template,
            phone=mask_phone(phone),
            message_id=message_id,
        )

    async def send_otp(self, phone: str, code: str) -> None:
        """Send the OTP template with the code as body parameter."""
        await self._send_template(phone, self.settings.otp_template_name, [code])

    async def send_welcome(self, phone: str) -> None:
        """Send the welcome template."""
        await self._send_template(phone, self.settings.welcome_template_name, [])
