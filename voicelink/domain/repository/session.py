"""Session redemption repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime

from voicelink.domain.value import AccountId


class SessionRedemptionRepository(ABC):
    """Records redeemed magic links so each is used at most once."""

    @abstractmethod
    async def consume(
        self, jti: str, account_id: AccountId, expires_at: datetime
    ) -> bool:
        """Record a magic link redemption.

        Args:
            jti: Token ID of the magic link
            account_id: Account the link belongs to
            expires_at: Link expiry, kept for cleanup

        Returns:
            True on first redemption, False if the link was already redeemed
        """
        pass

    @abstractmethod
    async def purge_expired(self, now: datetime) -> int:
        """Delete redemptions of links that expired before ``now``.

        An expired link fails verification before it reaches ``consume``, so
        its record is no longer needed.

        Returns:
            Number of records removed
        """
        pass
