"""Domain value objects for VoiceLink.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules.
"""

import re
from enum import Enum
from typing import Any

from pydantic import Field, field_validator

from voicelink.domain.value.common import RootValueObject, ValueObject

E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")


class CrmProvider(str, Enum):
    """Supported CRM identity providers.

    Each provider has its own link table.
    """

    TEAMLEADER = "teamleader"
    PIPEDRIVE = "pipedrive"
    ODOO = "odoo"


class WhatsAppStatus(str, Enum):
    """WhatsApp verification status of a provider link."""

    NOT_SET = "not_set"
    PENDING = "pending"
    ACTIVE = "active"


class InvitationStatus(str, Enum):
    """Status of a team-member invitation."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    EXPIRED = "expired"


class PhoneNumber(RootValueObject[str]):
    """Phone number in E.164 format (e.g. +3212345678).

    Spaces, dashes and parentheses are stripped before validation.
    """

    @field_validator("root")
    @classmethod
    def validate_e164(cls, v: str) -> str:
        """Normalize separators and validate E.164 format."""
        normalized = re.sub(r"[\s\-()]", "", v)
        if not E164_PATTERN.match(normalized):
            raise ValueError(
                "Phone number must be in E.164 format (e.g. +32471234567)"
            )
        return normalized


class InvitationToken(RootValueObject[str]):
    """URL-safe invitation token."""

    @field_validator("root")
    @classmethod
    def validate_token_format(cls, v: str) -> str:
        """Validate token is not empty."""
        if len(v) < 1 or len(v) > 255:
            raise ValueError("Token must be 1-255 characters")
        return v


class CrmProfile(ValueObject):
    """User profile as returned by a CRM provider.

    ``raw`` is the unmodified profile payload; it is stored as a snapshot on
    the provider link and refreshed on every login.
    """

    provider: CrmProvider
    external_id: str
    email: str | None = None
    name: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


class WhatsAppVerification(ValueObject):
    """WhatsApp verification state of one provider link."""

    status: WhatsAppStatus
    number: str | None = None
