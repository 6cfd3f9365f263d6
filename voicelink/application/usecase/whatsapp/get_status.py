"""Get WhatsApp status use case."""

from uuid import UUID

from pydantic import BaseModel

from voicelink.domain.service import VerificationService
from voicelink.domain.value import AccountId, CrmProvider, WhatsAppStatus


class GetWhatsAppStatusRequest(BaseModel):
    """Get WhatsApp status request."""

    provider: CrmProvider
    account_id: UUID


class GetWhatsAppStatusResponse(BaseModel):
    """Get WhatsApp status response."""

    status: WhatsAppStatus
    whatsapp_number: str | None


class GetWhatsAppStatusUseCase:
    """Use case for reading an account's verification state."""

    def __init__(self, verification_service: VerificationService) -> None:
        self.verification_service = verification_service

    async def execute(
        self, request: GetWhatsAppStatusRequest
    ) -> GetWhatsAppStatusResponse:
        """Return status and verified number.

        Raises:
            NotFoundError: If the account has no link for the provider
        """
        verification = await self.verification_service.get_status(
            request.provider, AccountId(request.account_id)
        )
        return GetWhatsAppStatusResponse(
            status=verification.status,
            whatsapp_number=verification.number,
        )
