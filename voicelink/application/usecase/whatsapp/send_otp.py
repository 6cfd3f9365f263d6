"""Send OTP use case."""

from datetime import datetime
from uuid import UUID

import logfire
from pydantic import BaseModel

from voicelink.adapter.error import DeliveryError
from voicelink.domain.repository import UnitOfWork
from voicelink.domain.service import (
    IdentityService,
    VerificationService,
    WhatsAppService,
)
from voicelink.domain.value import AccountId, CrmProvider, PhoneNumber
from voicelink.util.logging import mask_phone


class SendOtpRequest(BaseModel):
    """Send OTP request."""

    provider: CrmProvider
    account_id: UUID
    phone: PhoneNumber


class SendOtpResponse(BaseModel):
    """Send OTP response."""

    success: bool = True
    expires_at: datetime


class SendOtpUseCase:
    """Use case for starting WhatsApp verification of a phone number."""

    def __init__(
        self,
        identity_service: IdentityService,
        verification_service: VerificationService,
        whatsapp_service: WhatsAppService,
        unit_of_work: UnitOfWork,
    ) -> None:
        """Initialize send OTP use case.

        Args:
            identity_service: Identity domain service
            verification_service: Verification domain service
            whatsapp_service: WhatsApp messaging domain service
            unit_of_work: Commits the challenge before the code is sent
        """
        self.identity_service = identity_service
        self.verification_service = verification_service
        self.whatsapp_service = whatsapp_service
        self.unit_of_work = unit_of_work

    async def execute(self, request: SendOtpRequest) -> SendOtpResponse:
        """Issue a challenge and deliver the code.

        Steps:
        1. Check the account has a link for the provider
        2. Generate and store a challenge, replacing any outstanding one,
           and commit it
        3. Deliver the code over WhatsApp; on failure the challenge is
           discarded again

        Raises:
            NotFoundError: If the account has no link for the provider
            DeliveryError: If the code cannot be delivered; the user may
                request a new code
            PersistenceError: If the challenge cannot be stored
        """
        account_id = AccountId(request.account_id)

        with logfire.span(
            "send_otp.execute",
            provider=request.provider.value,
            account_id=str(account_id),
            phone=mask_phone(request.phone.root),
        ):
            await self.identity_service.get_link(request.provider, account_id)

            challenge = await self.verification_service.issue_challenge(
                request.provider, account_id, request.phone
            )
            await self.unit_of_work.commit()

            try:
                await self.whatsapp_service.send_otp(challenge.phone, challenge.code)
            except DeliveryError:
                await self.verification_service.discard_challenge(
                    request.provider, challenge
                )
                await self.unit_of_work.commit()
                raise

            return SendOtpResponse(expires_at=challenge.expires_at)
