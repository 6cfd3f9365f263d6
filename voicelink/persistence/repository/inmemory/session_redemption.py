"""In-memory session redemption repository for testing."""

from datetime import datetime

from voicelink.domain.repository import SessionRedemptionRepository
from voicelink.domain.value import AccountId
from voicelink.persistence.repository.inmemory.store import InMemoryStore


class InMemorySessionRedemptionRepository(SessionRedemptionRepository):
    """In-memory implementation of SessionRedemptionRepository for testing."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def consume(
        self, jti: str, account_id: AccountId, expires_at: datetime
    ) -> bool:
        """Record the token ID unless it was already redeemed."""
        if jti in self.store.redemptions:
            return False
        self.store.redemptions[jti] = (account_id, expires_at)
        return True

    async def purge_expired(self, now: datetime) -> int:
        expired = [
            jti
            for jti, (_, expires_at) in self.store.redemptions.items()
            if expires_at < now
        ]
        for jti in expired:
            del self.store.redemptions[jti]
        return len(expired)
