"""Accept invitation use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from voicelink.domain.repository import UnitOfWork
from voicelink.domain.service import InvitationService, WhatsAppService
from voicelink.domain.value import AccountId, CrmProvider, InvitationToken


class AcceptInvitationRequest(BaseModel):
    """Accept invitation request."""

    token: InvitationToken
    provider: CrmProvider


class AcceptInvitationResponse(BaseModel):
    """Accept invitation response."""

    success: bool = True
    message: str


class AcceptInvitationUseCase:
    """Use case for redeeming an invitation token."""

    def __init__(
        self,
        invitation_service: InvitationService,
        whatsapp_service: WhatsAppService,
        unit_of_work: UnitOfWork,
    ) -> None:
        """Initialize accept invitation use case.

        Args:
            invitation_service: Invitation domain service
            whatsapp_service: WhatsApp messaging domain service
            unit_of_work: Commits the acceptance before the code is sent
        """
        self.invitation_service = invitation_service
        self.whatsapp_service = whatsapp_service
        self.unit_of_work = unit_of_work

    async def execute(
        self, request: AcceptInvitationRequest, account_id: str
    ) -> AcceptInvitationResponse:
        """Execute accept invitation flow.

        Steps:
        1. Redeem the token, storing an OTP challenge for the invited phone
        2. Commit
        3. Deliver the code; a failure is logged and the acceptance stands

        Args:
            request: Token and provider
            account_id: Account ID of the authenticated user

        Returns:
            Outcome message for the user

        Raises:
            TokenMismatchError: If the token is unknown or belongs to another account
            TokenExpiredError: If the token has expired
        """
        challenge = await self.invitation_service.accept(
            request.provider, request.token.root, AccountId(UUID(account_id))
        )
        await self.unit_of_work.commit()

        delivered = await self.whatsapp_service.try_send_otp(
            challenge.phone, challenge.code
        )
        if not delivered:
            logfire.warn(
                "Invitation accepted without OTP delivery",
                provider=request.provider.value,
                account_id=account_id,
            )
            return AcceptInvitationResponse(
                message=(
                    "Invitation accepted. The verification code could not be sent, "
                    "please request a new one."
                )
            )

        return AcceptInvitationResponse(
            message="Invitation accepted. Verification code sent via WhatsApp."
        )
