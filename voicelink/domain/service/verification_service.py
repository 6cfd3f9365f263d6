"""WhatsApp verification domain service."""

from datetime import datetime, timezone

import logfire

from voicelink.config import OtpSettings
from voicelink.domain.error import (
    ChallengeExpiredError,
    IncorrectCodeError,
    NoPendingChallengeError,
)
from voicelink.domain.model import OtpChallenge
from voicelink.domain.repository import VerificationRepository
from voicelink.domain.value import (
    AccountId,
    CrmProvider,
    PhoneNumber,
    WhatsAppVerification,
)
from voicelink.util import otp
from voicelink.util.logging import mask_phone

from .base import Service


class VerificationService(Service):
    """Domain service for the OTP verification lifecycle."""

    def __init__(
        self,
        verification_repositories: dict[CrmProvider, VerificationRepository],
        otp_settings: OtpSettings,
    ) -> None:
        """Initialize verification service.

        Args:
            verification_repositories: Verification repository per CRM provider
            otp_settings: OTP settings
        """
        self.verification_repositories = verification_repositories
        self.otp_settings = otp_settings

    async def issue_challenge(
        self,
        provider: CrmProvider,
        account_id: AccountId,
        phone: PhoneNumber,
        now: datetime | None = None,
    ) -> OtpChallenge:
        """Generate and store a new challenge, replacing any outstanding one.

        Args:
            provider: CRM provider of the account's link
            account_id: Account to verify
            phone: Phone number the code will be sent to
            now: Current time, defaults to the system clock

        Returns:
            The stored challenge
        """
        now = now or datetime.now(timezone.utc)
        with logfire.span(
            "verification_service.issue_challenge",
            provider=provider.value,
            account_id=str(account_id),
            phone=mask_phone(phone.root),
        ):
            challenge = OtpChallenge(
                account_id=account_id,
                phone=phone.root,
                code=otp.generate_code(),
                expires_at=otp.expiry_from(now, self.otp_settings.ttl_minutes),
            )
            await self.verification_repositories[provider].store_challenge(
                account_id, challenge.phone, challenge.code, challenge.expires_at
            )
            logfire.info(
                "OTP challenge stored",
                provider=provider.value,
                account_id=str(account_id),
                expires_at=challenge.expires_at.isoformat(),
            )
            return challenge

    async def discard_challenge(
        self, provider: CrmProvider, challenge: OtpChallenge
    ) -> None:
        """Drop a challenge whose code never reached the user."""
        await self.verification_repositories[provider].discard_challenge(
            challenge.account_id, challenge.code
        )
        logfire.info(
            "OTP challenge discarded",
            provider=provider.value,
            account_id=str(challenge.account_id),
        )

    async def verify(
        self,
        provider: CrmProvider,
        account_id: AccountId,
        code: str,
        now: datetime | None = None,
    ) -> str:
        """Check a submitted code and mark the phone verified.

        Args:
            provider: CRM provider of the account's link
            account_id: Account being verified
            code: Code entered by the user
            now: Current time, defaults to the system clock

        Returns:
            The verified phone number

        Raises:
            NoPendingChallengeError: If no challenge is outstanding
            ChallengeExpiredError: If the challenge has expired
            IncorrectCodeError: If the code does not match
        """
        now = now or datetime.now(timezone.utc)
        repository = self.verification_repositories[provider]

        with logfire.span(
            "verification_service.verify",
            provider=provider.value,
            account_id=str(account_id),
        ):
            challenge = await repository.get_challenge(account_id)
            if not challenge:
                logfire.warn("No pending OTP challenge", account_id=str(account_id))
                raise NoPendingChallengeError()

            result = otp.validate(challenge, code, now)
            if result.reason == otp.OtpFailureReason.EXPIRED:
                logfire.warn("OTP challenge expired", account_id=str(account_id))
                raise ChallengeExpiredError()
            if not result.valid:
                logfire.warn("Incorrect OTP submitted", account_id=str(account_id))
                raise IncorrectCodeError()

            # Guarded by the code so a concurrent verify cannot consume it twice
            await repository.mark_verified(
                account_id, challenge.phone, code=challenge.code
            )
            logfire.info(
                "WhatsApp number verified",
                provider=provider.value,
                account_id=str(account_id),
                phone=mask_phone(challenge.phone),
            )
            return challenge.phone

    async def get_status(
        self, provider: CrmProvider, account_id: AccountId
    ) -> WhatsAppVerification:
        """Get the account's WhatsApp verification state for a provider."""
        return await self.verification_repositories[provider].get_status(account_id)
