"""Verification repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from voicelink.domain.model.otp_challenge import OtpChallenge
from voicelink.domain.value import AccountId, CrmProvider
from voicelink.domain.value.types import WhatsAppVerification


class VerificationRepository(ABC):
    """Repository for OTP challenges and WhatsApp verification state.

    Every operation is a single-row statement keyed by account ID on the
    provider's link table.
    """

    provider: CrmProvider

    @abstractmethod
    async def store_challenge(
        self, account_id: AccountId, phone: str, code: str, expires_at: datetime
    ) -> None:
        """Store a challenge, replacing any outstanding one.

        Also sets the WhatsApp status to pending.

        Args:
            account_id: Account the challenge belongs to
            phone: Phone number the code is sent to
            code: Six-digit code
            expires_at: Expiry timestamp

        Raises:
            NotFoundError: If the account has no link for this provider
            PersistenceError: On storage failure
        """
        pass

    @abstractmethod
    async def get_challenge(self, account_id: AccountId) -> Optional[OtpChallenge]:
        """Get the outstanding challenge.

        Args:
            account_id: Account to look up

        Returns:
            The challenge, or None if none is outstanding
        """
        pass

    @abstractmethod
    async def mark_verified(
        self, account_id: AccountId, phone: str, code: str | None = None
    ) -> None:
        """Consume the challenge and record the verified phone.

        Clears the challenge, stores the number and sets the status to active
        in one update.

        Args:
            account_id: Account whose challenge is consumed
            phone: Verified phone number
            code: When given, only a challenge still holding this code is consumed

        Raises:
            NoPendingChallengeError: If no (matching) challenge is outstanding
            PersistenceError: On storage failure
        """
        pass

    @abstractmethod
    async def discard_challenge(self, account_id: AccountId, code: str) -> None:
        """Drop an outstanding challenge that still holds ``code``.

        The WhatsApp status falls back to active when a number was verified
        before, and to not set otherwise. A newer challenge is left alone.

        Args:
            account_id: Account the challenge belongs to
            code: Code of the challenge to drop

        Raises:
            PersistenceError: On storage failure
        """
        pass

    @abstractmethod
    async def get_status(self, account_id: AccountId) -> WhatsAppVerification:
        """Get the current WhatsApp verification state.

        Args:
            account_id: Account to look up

        Returns:
            Status and verified number

        Raises:
            NotFoundError: If the account has no link for this provider
        """
        pass
