"""WhatsApp sender selection."""

import httpx
import logfire

from voicelink.adapter.whatsapp.meta import MetaWhatsAppSender
from voicelink.adapter.whatsapp.twilio import TwilioWhatsAppSender
from voicelink.config import Settings
from voicelink.domain.service.whatsapp_service import WhatsAppSender
from voicelink.util.error import ConfigurationError, UnknownProviderError

SUPPORTED_PROVIDERS = ["meta", "twilio"]


def create_whatsapp_sender(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> WhatsAppSender:
    """Create the configured WhatsApp sender.

    Called at startup, so a misconfigured deployment fails before serving
    requests.

    Args:
        settings: Application settings
        transport: Optional httpx transport (used by tests)

    Returns:
        Sender for the configured variant

    Raises:
        UnknownProviderError: If ``whatsapp.provider`` is not supported
        ConfigurationError: If credentials of the selected variant are missing
    """
    provider = settings.whatsapp.provider.strip().lower()
    timeout = settings.http.timeout_seconds

    if provider == "meta":
        meta = settings.whatsapp.meta
        missing = [
            name
            for name, value in (
                ("WHATSAPP__META__ACCESS_TOKEN", meta.access_token),
                ("WHATSAPP__META__PHONE_NUMBER_ID", meta.phone_number_id),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Meta WhatsApp sender is missing configuration: {', '.join(missing)}"
            )
        sender = MetaWhatsAppSender(meta, timeout=timeout, transport=transport)

    elif provider == "twilio":
        twilio = settings.whatsapp.twilio
        missing = [
            name
            for name, value in (
                ("WHATSAPP__TWILIO__ACCOUNT_SID", twilio.account_sid),
                ("WHATSAPP__TWILIO__AUTH_TOKEN", twilio.auth_token),
                ("WHATSAPP__TWILIO__FROM_NUMBER", twilio.from_number),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"Twilio WhatsApp sender is missing configuration: {', '.join(missing)}"
            )
        sender = TwilioWhatsAppSender(twilio, timeout=timeout, transport=transport)

    else:
        raise UnknownProviderError(settings.whatsapp.provider, SUPPORTED_PROVIDERS)

    logfire.info("WhatsApp sender configured", provider=sender.name)
    return sender
