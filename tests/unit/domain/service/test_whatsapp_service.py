"""Unit tests for WhatsAppService."""

import pytest

from voicelink.adapter.error import DeliveryError
from voicelink.adapter.whatsapp import MockWhatsAppSender
from voicelink.domain.service import WhatsAppService
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


class TestWhatsAppService:
    """Tests for OTP and welcome delivery."""

    @pytest.mark.asyncio
    async def test_send_otp_delivers_code(self, unit_env):
        # Arrange
        whatsapp_service = await unit_env.get(WhatsAppService)
        sender = await unit_env.get(MockWhatsAppSender)

        # Act
        await whatsapp_service.send_otp("+3212345678", "482913")

        # Assert
        assert sender.last_code("+3212345678") == "482913"

    @pytest.mark.asyncio
    async def test_send_otp_propagates_delivery_failure(self, unit_env):
        whatsapp_service = await unit_env.get(WhatsAppService)
        sender = await unit_env.get(MockWhatsAppSender)
        sender.fail = True

        with pytest.raises(DeliveryError):
            await whatsapp_service.send_otp("+3212345678", "482913")

    @pytest.mark.asyncio
    async def test_try_send_otp_reports_failure(self, unit_env):
        """Best-effort delivery returns False instead of raising."""
        # Arrange
        whatsapp_service = await unit_env.get(WhatsAppService)
        sender = await unit_env.get(MockWhatsAppSender)
        sender.fail = True

        # Act
        delivered = await whatsapp_service.try_send_otp("+3212345678", "482913")

        # Assert
        assert delivered is False
        assert sender.sent == []

    @pytest.mark.asyncio
    async def test_try_send_welcome(self, unit_env):
        # Arrange
        whatsapp_service = await unit_env.get(WhatsAppService)
        sender = await unit_env.get(MockWhatsAppSender)

        # Act
        delivered = await whatsapp_service.try_send_welcome("+3212345678")

        # Assert
        assert delivered is True
        assert [m.kind for m in sender.sent] == ["welcome"]

    @pytest.mark.asyncio
    async def test_try_send_welcome_swallows_failure(self, unit_env):
        whatsapp_service = await unit_env.get(WhatsAppService)
        sender = await unit_env.get(MockWhatsAppSender)
        sender.fail = True

        assert await whatsapp_service.try_send_welcome("+3212345678") is False
