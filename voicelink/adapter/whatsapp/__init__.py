"""WhatsApp senders."""

from .factory import SUPPORTED_PROVIDERS, create_whatsapp_sender
from .meta import MetaWhatsAppSender
from .mock import MockWhatsAppSender, SentMessage
from .twilio import TwilioWhatsAppSender

__all__ = [
    "MetaWhatsAppSender",
    "MockWhatsAppSender",
    "SUPPORTED_PROVIDERS",
    "SentMessage",
    "TwilioWhatsAppSender",
    "create_whatsapp_sender",
]
