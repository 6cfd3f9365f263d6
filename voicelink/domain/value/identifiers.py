"""Strongly typed identifiers for VoiceLink domain entities."""

from typing import NewType
from uuid import UUID

AccountId = NewType("AccountId", UUID)
ProviderLinkId = NewType("ProviderLinkId", UUID)
