"""Tests for the Meta WhatsApp Cloud API sender."""

import json

import httpx
import pytest

from voicelink.adapter.error import DeliveryError
from voicelink.adapter.whatsapp import MetaWhatsAppSender
from voicelink.config import MetaWhatsAppSettings

SETTINGS = MetaWhatsAppSettings(
    access_token="meta-token",
    phone_number_id="1055",
    otp_template_name="otp_code",
    welcome_template_name="welcome",
)


def make_sender(handler) -> MetaWhatsAppSender:
    return MetaWhatsAppSender(SETTINGS, transport=httpx.MockTransport(handler))


class TestMetaWhatsAppSender:
    """Tests for template messages."""

    @pytest.mark.asyncio
    async def test_send_otp_posts_template_with_code(self):
        """The OTP template carries the code as its only body parameter."""
        # Arrange
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"messages": [{"id": "wamid.1"}]})

        sender = make_sender(handler)

        # Act
        await sender.send_otp("+32 12345678", "048213")

        # Assert
        assert seen["url"] == "https://graph.facebook.com/v21.0/1055/messages"
        assert seen["auth"] == "Bearer meta-token"
        assert seen["body"] == {
            "messaging_product": "whatsapp",
            "to": "3212345678",
            "type": "template",
            "template": {
                "name": "otp_code",
                "language": {"code": "en"},
                "components": [
                    {
                        "type": "body",
                        "parameters": [{"type": "text", "text": "048213"}],
                    }
                ],
            },
        }

    def test_welcome_template_has_no_parameters(self):
        sender = make_sender(lambda request: httpx.Response(200, json={}))

        payload = sender.template_payload("+3212345678", "welcome", [])

        assert "components" not in payload["template"]

    @pytest.mark.asyncio
    async def test_rejection_raises_delivery_error(self):
        """The Graph API error message is surfaced."""
        # Arrange
        sender = make_sender(
            lambda request: httpx.Response(
                400,
                json={"error": {"message": "Template name does not exist"}},
            )
        )

        # Act & Assert
        with pytest.raises(DeliveryError, match="Template name does not exist") as exc_info:
            await sender.send_otp("+3212345678", "048213")
        assert exc_info.value.status_code == 400
        assert exc_info.value.provider == "meta"

    @pytest.mark.asyncio
    async def test_timeout_raises_delivery_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        sender = make_sender(handler)

        with pytest.raises(DeliveryError, match="timed out"):
            await sender.send_welcome("+3212345678")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            ["error"],
            "Service Unavailable",
            {"error": "rate limited"},
            {"error": None},
        ],
    )
    async def test_rejection_with_unexpected_body(self, body):
        """Error bodies without an error object still yield a DeliveryError."""
        sender = make_sender(lambda request: httpx.Response(503, json=body))

        with pytest.raises(DeliveryError, match="HTTP 503") as exc_info:
            await sender.send_otp("+3212345678", "048213")
        assert exc_info.value.status_code == 503
