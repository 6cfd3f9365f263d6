"""In-memory invitation repository for testing."""

from datetime import datetime, timezone
from typing import Optional

from voicelink.domain.error import NotFoundError, TokenMismatchError
from voicelink.domain.model import ProviderLink
from voicelink.domain.repository import InvitationRepository
from voicelink.domain.value import (
    AccountId,
    CrmProvider,
    InvitationStatus,
    WhatsAppStatus,
)
from voicelink.persistence.repository.inmemory.store import InMemoryStore


class InMemoryInvitationRepository(InvitationRepository):
    """In-memory implementation of InvitationRepository for testing."""

    def __init__(self, store: InMemoryStore, provider: CrmProvider) -> None:
        self.store = store
        self.provider = provider

    async def issue(
        self,
        account_id: AccountId,
        token: str,
        expires_at: datetime,
        email: str | None,
        phone: str,
        invited_by: AccountId,
    ) -> ProviderLink:
        """Stamp a pending invitation on the account's link."""
        link = self.store.active_link(self.provider, account_id)
        if not link or link.invited_by not in (None, invited_by):
            raise NotFoundError(f"{self.provider.value} link", str(account_id))
        return self.store.replace_link(
            link.model_copy(
                update={
                    "invitation_token": token,
                    "invitation_expires_at": expires_at,
                    "invitation_status": InvitationStatus.PENDING,
                    "invitation_email": email,
                    "invitation_phone": phone,
                    "invited_by": invited_by,
                    "updated_at": datetime.now(timezone.utc),
                }
            )
        )

    async def find_by_token(
        self, token: str, account_id: AccountId
    ) -> Optional[ProviderLink]:
        """Find the link holding the token for the given account."""
        for link in self.store.links[self.provider]:
            if (
                link.invitation_token == token
                and link.account_id == account_id
                and not link.is_deleted
            ):
                return link
        return None

    async def accept_with_challenge(
        self,
        account_id: AccountId,
        token: str,
        phone: str,
        code: str,
        otp_expires_at: datetime,
    ) -> None:
        """Clear the token, accept, and store the challenge."""
        link = await self.find_by_token(token, account_id)
        if not link:
            raise TokenMismatchError()

        self.store.replace_link(
            link.model_copy(
                update={
                    "invitation_token": None,
                    "invitation_expires_at": None,
                    "invitation_status": InvitationStatus.ACCEPTED,
                    "otp_code": code,
                    "otp_phone": phone,
                    "otp_expires_at": otp_expires_at,
                    "whatsapp_status": WhatsAppStatus.PENDING,
                    "updated_at": datetime.now(timezone.utc),
                }
            )
        )
