"""Get current account use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from voicelink.domain.service import IdentityService, JWTService
from voicelink.domain.service.invitation_service import effective_invitation_status
from voicelink.domain.value import (
    AccountId,
    CrmProvider,
    InvitationStatus,
    WhatsAppStatus,
)


class GetCurrentAccountRequest(BaseModel):
    """Get current account request."""

    token: str  # Session JWT


class ProviderLinkInfo(BaseModel):
    """Provider link information for response."""

    provider: CrmProvider
    external_id: str
    whatsapp_status: WhatsAppStatus
    whatsapp_number: str | None
    invitation_status: InvitationStatus | None
    invited_by: str | None


class GetCurrentAccountResponse(BaseModel):
    """Get current account response."""

    account_id: str
    email: str
    display_name: str | None
    created_at: datetime
    links: list[ProviderLinkInfo]


class GetCurrentAccountUseCase:
    """Use case for getting the current authenticated account."""

    def __init__(
        self,
        jwt_service: JWTService,
        identity_service: IdentityService,
    ) -> None:
        """Initialize get current account use case.

        Args:
            jwt_service: JWT token domain service
            identity_service: Identity domain service
        """
        self.jwt_service = jwt_service
        self.identity_service = identity_service

    async def execute(
        self, request: GetCurrentAccountRequest
    ) -> GetCurrentAccountResponse:
        """Execute get current account flow.

        Steps:
        1. Verify session token
        2. Load account
        3. Load the account's links across all providers

        Raises:
            JWTError: If token is invalid or expired
            NotFoundError: If account not found
        """
        payload = self.jwt_service.verify_token(request.token)
        account = await self.identity_service.get_account(
            AccountId(UUID(payload.account_id))
        )
        links = await self.identity_service.get_links(account.id)

        return GetCurrentAccountResponse(
            account_id=str(account.id),
            email=account.email,
            display_name=account.display_name,
            created_at=account.created_at,
            links=[
                ProviderLinkInfo(
                    provider=link.provider,
                    external_id=link.external_id,
                    whatsapp_status=link.whatsapp_status,
                    whatsapp_number=link.whatsapp_number,
                    invitation_status=effective_invitation_status(link),
                    invited_by=str(link.invited_by) if link.invited_by else None,
                )
                for link in links
            ],
        )
