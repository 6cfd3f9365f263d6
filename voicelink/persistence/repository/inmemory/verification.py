"""In-memory verification repository for testing."""

from datetime import datetime, timezone
from typing import Optional

from voicelink.domain.error import NoPendingChallengeError, NotFoundError
from voicelink.domain.model import OtpChallenge, ProviderLink
from voicelink.domain.repository import VerificationRepository
from voicelink.domain.value import (
    AccountId,
    CrmProvider,
    WhatsAppStatus,
    WhatsAppVerification,
)
from voicelink.persistence.repository.inmemory.store import InMemoryStore


class InMemoryVerificationRepository(VerificationRepository):
    """In-memory implementation of VerificationRepository for testing."""

    def __init__(self, store: InMemoryStore, provider: CrmProvider) -> None:
        self.store = store
        self.provider = provider

    def _require_link(self, account_id: AccountId) -> ProviderLink:
        link = self.store.active_link(self.provider, account_id)
        if not link:
            raise NotFoundError(f"{self.provider.value} link", str(account_id))
        return link

    async def store_challenge(
        self, account_id: AccountId, phone: str, code: str, expires_at: datetime
    ) -> None:
        """Store a challenge, overwriting any outstanding one."""
        link = self._require_link(account_id)
        self.store.replace_link(
            link.model_copy(
                update={
                    "otp_code": code,
                    "otp_phone": phone,
                    "otp_expires_at": expires_at,
                    "whatsapp_status": WhatsAppStatus.PENDING,
                    "updated_at": datetime.now(timezone.utc),
                }
            )
        )

    async def get_challenge(self, account_id: AccountId) -> Optional[OtpChallenge]:
        """Get the outstanding challenge, if any."""
        link = self.store.active_link(self.provider, account_id)
        if not link or not link.otp_code:
            return None
        return OtpChallenge(
            account_id=account_id,
            phone=link.otp_phone,
            code=link.otp_code,
            expires_at=link.otp_expires_at,
        )

    async def mark_verified(
        self, account_id: AccountId, phone: str, code: str | None = None
    ) -> None:
        """Consume the challenge and activate the number."""
        link = self.store.active_link(self.provider, account_id)
        if not link or not link.otp_code:
            raise NoPendingChallengeError()
        if code is not None and link.otp_code != code:
            raise NoPendingChallengeError()

        self.store.replace_link(
            link.model_copy(
                update={
                    "whatsapp_number": phone,
                    "whatsapp_status": WhatsAppStatus.ACTIVE,
                    "otp_code": None,
                    "otp_phone": None,
                    "otp_expires_at": None,
                    "updated_at": datetime.now(timezone.utc),
                }
            )
        )

    async def discard_challenge(self, account_id: AccountId, code: str) -> None:
        """Clear the challenge holding ``code`` and restore the prior status."""
        link = self.store.active_link(self.provider, account_id)
        if not link or link.otp_code != code:
            return

        self.store.replace_link(
            link.model_copy(
                update={
                    "otp_code": None,
                    "otp_phone": None,
                    "otp_expires_at": None,
                    "whatsapp_status": (
                        WhatsAppStatus.ACTIVE
                        if link.whatsapp_number
                        else WhatsAppStatus.NOT_SET
                    ),
                    "updated_at": datetime.now(timezone.utc),
                }
            )
        )

    async def get_status(self, account_id: AccountId) -> WhatsAppVerification:
        """Get WhatsApp status and verified number."""
        link = self._require_link(account_id)
        return WhatsAppVerification(
            status=link.whatsapp_status, number=link.whatsapp_number
        )
