"""Verify OTP use case."""

from uuid import UUID

from pydantic import BaseModel

from voicelink.domain.repository import UnitOfWork
from voicelink.domain.service import VerificationService, WhatsAppService
from voicelink.domain.value import AccountId, CrmProvider


class VerifyOtpRequest(BaseModel):
    """Verify OTP request."""

    provider: CrmProvider
    account_id: UUID
    code: str


class VerifyOtpResponse(BaseModel):
    """Verify OTP response."""

    success: bool = True
    whatsapp_number: str


class VerifyOtpUseCase:
    """Use case for completing WhatsApp verification."""

    def __init__(
        self,
        verification_service: VerificationService,
        whatsapp_service: WhatsAppService,
        unit_of_work: UnitOfWork,
    ) -> None:
        """Initialize verify OTP use case.

        Args:
            verification_service: Verification domain service
            whatsapp_service: WhatsApp messaging domain service
            unit_of_work: Commits the verification before success is reported
        """
        self.verification_service = verification_service
        self.whatsapp_service = whatsapp_service
        self.unit_of_work = unit_of_work

    async def execute(self, request: VerifyOtpRequest) -> VerifyOtpResponse:
        """Check the code, mark the number verified and send a welcome message.

        The verification is committed before the welcome message goes out.
        The welcome message is best-effort; its failure does not undo the
        verification.

        Raises:
            IncorrectCodeError: If the code is wrong or no challenge is pending
            ChallengeExpiredError: If the challenge has expired
            PersistenceError: If the verification cannot be committed
        """
        phone = await self.verification_service.verify(
            request.provider, AccountId(request.account_id), request.code
        )
        await self.unit_of_work.commit()
        await self.whatsapp_service.try_send_welcome(phone)
        return VerifyOtpResponse(whatsapp_number=phone)
