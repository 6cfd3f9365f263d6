"""WhatsApp infrastructure providers."""

from dishka import Scope, provide

from voicelink.adapter.whatsapp import create_whatsapp_sender
from voicelink.config import Settings
from voicelink.domain.service.whatsapp_service import WhatsAppSender
from voicelink.util.di.base import ProviderBase


class WhatsAppProvider(ProviderBase):
    """WhatsApp component base."""

    __mock_component__ = "whatsapp"


class ProdWhatsAppProvider(WhatsAppProvider):
    """Production WhatsApp provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_whatsapp_sender(self, settings: Settings) -> WhatsAppSender:
        """Provide the configured WhatsApp sender.

        Raises:
            UnknownProviderError: If the configured variant is not supported
            ConfigurationError: If its credentials are missing
        """
        return create_whatsapp_sender(settings)
