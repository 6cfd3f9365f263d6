"""Invitation domain service."""

import secrets
from datetime import datetime, timedelta, timezone

import logfire

from voicelink.config import InvitationSettings, OtpSettings
from voicelink.domain.error import TokenExpiredError, TokenMismatchError
from voicelink.domain.model import OtpChallenge, ProviderLink
from voicelink.domain.repository import InvitationRepository
from voicelink.domain.value import AccountId, CrmProvider, InvitationStatus
from voicelink.util import otp

from .base import Service


def effective_invitation_status(
    link: ProviderLink, now: datetime | None = None
) -> InvitationStatus | None:
    """Invitation status as seen at ``now``.

    A pending token past its expiry reads as expired; nothing sweeps it.
    """
    now = now or datetime.now(timezone.utc)
    if (
        link.invitation_status == InvitationStatus.PENDING
        and link.invitation_expires_at is not None
        and now >= link.invitation_expires_at
    ):
        return InvitationStatus.EXPIRED
    return link.invitation_status


def can_reissue(link: ProviderLink, inviter: AccountId) -> bool:
    """Whether ``inviter`` may issue a new token on an existing link.

    Only a pending invitation sent by the same inviter can be renewed.
    """
    return (
        link.invited_by == inviter
        and link.invitation_status == InvitationStatus.PENDING
    )


class InvitationService(Service):
    """Domain service for team-member invitations.

    State machine: pending -> accepted (OTP challenge issued). Expiry is
    checked when a token is redeemed.
    """

    def __init__(
        self,
        invitation_repositories: dict[CrmProvider, InvitationRepository],
        invitation_settings: InvitationSettings,
        otp_settings: OtpSettings,
    ) -> None:
        """Initialize invitation service.

        Args:
            invitation_repositories: Invitation repository per CRM provider
            invitation_settings: Invitation settings
            otp_settings: OTP settings for the challenge issued on acceptance
        """
        self.invitation_repositories = invitation_repositories
        self.invitation_settings = invitation_settings
        self.otp_settings = otp_settings

    async def issue(
        self,
        provider: CrmProvider,
        account_id: AccountId,
        email: str | None,
        phone: str,
        invited_by: AccountId,
        now: datetime | None = None,
    ) -> ProviderLink:
        """Issue a fresh invitation token for an account.

        Args:
            provider: CRM provider of the invited account's link
            account_id: Invited account
            email: Address the invitation goes to
            phone: Phone number to verify on acceptance
            invited_by: Inviting account
            now: Current time, defaults to the system clock

        Returns:
            Link carrying the pending invitation
        """
        now = now or datetime.now(timezone.utc)
        expires_at = now + timedelta(hours=self.invitation_settings.token_ttl_hours)

        with logfire.span(
            "invitation_service.issue",
            provider=provider.value,
            account_id=str(account_id),
            invited_by=str(invited_by),
        ):
            link = await self.invitation_repositories[provider].issue(
                account_id=account_id,
                token=secrets.token_urlsafe(32),
                expires_at=expires_at,
                email=email,
                phone=phone,
                invited_by=invited_by,
            )
            logfire.info(
                "Invitation issued",
                provider=provider.value,
                account_id=str(account_id),
                expires_at=expires_at.isoformat(),
            )
            return link

    async def accept(
        self,
        provider: CrmProvider,
        token: str,
        account_id: AccountId,
        now: datetime | None = None,
    ) -> OtpChallenge:
        """Redeem an invitation token.

        The token must belong to the redeeming account. On success the token
        is cleared, the invitation marked accepted and an OTP challenge is
        stored for the invited phone number, all in one update.

        Args:
            provider: CRM provider of the account's link
            token: Invitation token
            account_id: Account redeeming the token
            now: Current time, defaults to the system clock

        Returns:
            The challenge stored for the invited phone number

        Raises:
            TokenMismatchError: If the token is unknown or belongs to another account
            TokenExpiredError: If the token has expired; nothing is changed
        """
        now = now or datetime.now(timezone.utc)
        repository = self.invitation_repositories[provider]

        with logfire.span(
            "invitation_service.accept",
            provider=provider.value,
            account_id=str(account_id),
        ):
            link = await repository.find_by_token(token, account_id)
            if not link:
                logfire.warn(
                    "Invitation token mismatch",
                    provider=provider.value,
                    account_id=str(account_id),
                )
                raise TokenMismatchError()

            if link.invitation_expires_at and now >= link.invitation_expires_at:
                logfire.warn(
                    "Invitation token expired",
                    provider=provider.value,
                    account_id=str(account_id),
                )
                raise TokenExpiredError()

            challenge = OtpChallenge(
                account_id=account_id,
                phone=link.invitation_phone,
                code=otp.generate_code(),
                expires_at=otp.expiry_from(now, self.otp_settings.ttl_minutes),
            )

            await repository.accept_with_challenge(
                account_id=account_id,
                token=token,
                phone=challenge.phone,
                code=challenge.code,
                otp_expires_at=challenge.expires_at,
            )
            logfire.info(
                "Invitation accepted",
                provider=provider.value,
                account_id=str(account_id),
            )
            return challenge
