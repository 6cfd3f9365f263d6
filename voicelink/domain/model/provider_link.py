"""Provider link entity.

Binds one CRM user to one account and carries the WhatsApp verification
and invitation state for that user.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import Field

from voicelink.domain.model.common import DomainModel
from voicelink.domain.value import (
    AccountId,
    CrmProvider,
    InvitationStatus,
    ProviderLinkId,
    WhatsAppStatus,
)


class ProviderLink(DomainModel):
    """Link between an external CRM user and an internal account.

    Business rules:
    - At most one non-deleted link per (provider, external_id)
    - account_id never changes after creation
    - profile is overwritten on every login
    - A pending OTP challenge lives in the otp_* fields; at most one at a time
    """

    id: ProviderLinkId
    account_id: AccountId
    provider: CrmProvider
    external_id: str
    profile: dict[str, Any] = Field(default_factory=dict)

    # WhatsApp verification
    whatsapp_number: Optional[str] = None
    whatsapp_status: WhatsAppStatus = WhatsAppStatus.NOT_SET
    otp_code: Optional[str] = None
    otp_phone: Optional[str] = None
    otp_expires_at: Optional[datetime] = None

    # Team-member invitation
    invitation_token: Optional[str] = None
    invitation_expires_at: Optional[datetime] = None
    invitation_status: Optional[InvitationStatus] = None
    invitation_email: Optional[str] = None
    invitation_phone: Optional[str] = None
    invited_by: Optional[AccountId] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        """Whether the link has been soft-deleted."""
        return self.deleted_at is not None
