"""Domain value objects for VoiceLink."""

from voicelink.domain.value.identifiers import AccountId, ProviderLinkId
from voicelink.domain.value.types import (
    CrmProfile,
    CrmProvider,
    InvitationStatus,
    InvitationToken,
    PhoneNumber,
    WhatsAppStatus,
    WhatsAppVerification,
)

__all__ = [
    # Identifiers
    "AccountId",
    "ProviderLinkId",
    # Types
    "CrmProfile",
    "CrmProvider",
    "InvitationStatus",
    "InvitationToken",
    "PhoneNumber",
    "WhatsAppStatus",
    "WhatsAppVerification",
]
