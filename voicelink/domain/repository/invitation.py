"""Invitation repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from voicelink.domain.model.provider_link import ProviderLink
from voicelink.domain.value import AccountId, CrmProvider


class InvitationRepository(ABC):
    """Repository for invitation tokens stored on provider links."""

    provider: CrmProvider

    @abstractmethod
    async def issue(
        self,
        account_id: AccountId,
        token: str,
        expires_at: datetime,
        email: str | None,
        phone: str,
        invited_by: AccountId,
    ) -> ProviderLink:
        """Stamp a pending invitation on the account's link.

        Replaces any earlier invitation for the account. The inviter of a
        link is recorded once and never changed.

        Args:
            account_id: Invited account
            token: Invitation token
            expires_at: Token expiry
            email: Address the invitation was sent to
            phone: Phone number the OTP will go to on acceptance
            invited_by: Inviting account

        Returns:
            The updated link

        Raises:
            NotFoundError: If the account has no link for this provider, or
                the link was invited by another account
        """
        pass

    @abstractmethod
    async def find_by_token(
        self, token: str, account_id: AccountId
    ) -> Optional[ProviderLink]:
        """Find the link holding ``token`` for ``account_id``.

        Args:
            token: Invitation token
            account_id: Account redeeming the token

        Returns:
            The link if the token exists and belongs to the account, None otherwise
        """
        pass

    @abstractmethod
    async def accept_with_challenge(
        self,
        account_id: AccountId,
        token: str,
        phone: str,
        code: str,
        otp_expires_at: datetime,
    ) -> None:
        """Accept the invitation and store an OTP challenge in one update.

        Clears the token, marks the invitation accepted and stores the
        challenge with a pending WhatsApp status.

        Args:
            account_id: Account accepting the invitation
            token: Token being redeemed; the update only applies while it is unused
            phone: Phone number for the challenge
            code: Six-digit code
            otp_expires_at: Challenge expiry

        Raises:
            TokenMismatchError: If the token was redeemed concurrently
            PersistenceError: On storage failure
        """
        pass
