"""Create invitation use case."""

from datetime import datetime
from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from voicelink.domain.error import DuplicateProviderLinkError, InvitationConflictError
from voicelink.domain.repository import UnitOfWork
from voicelink.domain.service import IdentityService, InvitationService
from voicelink.domain.service.invitation_service import can_reissue
from voicelink.domain.value import AccountId, CrmProfile, CrmProvider, PhoneNumber


class CreateInvitationRequest(BaseModel):
    """Invite a CRM teammate.

    The teammate is identified by their user ID on the CRM, so their first
    login through the provider lands on the invited account.
    """

    provider: CrmProvider
    external_id: str = Field(..., min_length=1)
    email: str | None = None
    name: str | None = None
    phone: PhoneNumber


class CreateInvitationResponse(BaseModel):
    """Create invitation response."""

    success: bool = True
    account_id: str
    token: str
    expires_at: datetime


class CreateInvitationUseCase:
    """Use case for inviting a teammate to verify their WhatsApp number."""

    def __init__(
        self,
        identity_service: IdentityService,
        invitation_service: InvitationService,
        unit_of_work: UnitOfWork,
    ) -> None:
        """Initialize create invitation use case.

        Args:
            identity_service: Identity domain service
            invitation_service: Invitation domain service
            unit_of_work: Commits the invitation before it is returned
        """
        self.identity_service = identity_service
        self.invitation_service = invitation_service
        self.unit_of_work = unit_of_work

    async def execute(
        self, request: CreateInvitationRequest, inviter_id: str
    ) -> CreateInvitationResponse:
        """Execute create invitation flow.

        Steps:
        1. Check the inviter has a link for the provider
        2. Create the teammate's account and link, or reuse the link of a
           pending invitation the inviter sent earlier
        3. Stamp the link with a fresh invitation token
        4. Commit

        Args:
            request: Teammate details
            inviter_id: Account ID of the authenticated inviter

        Returns:
            The invitation token and its expiry

        Raises:
            NotFoundError: If the inviter has no link for the provider
            InvitationConflictError: If the CRM user already has an account
                that is not a pending invitation of the inviter
            AccountCreationError: If the teammate's account cannot be created
        """
        inviter = AccountId(UUID(inviter_id))
        provider = request.provider

        with logfire.span(
            "create_invitation.execute",
            provider=provider.value,
            inviter_id=inviter_id,
        ):
            await self.identity_service.get_link(provider, inviter)

            link = await self.identity_service.find_link_by_external_id(
                provider, request.external_id
            )
            if link and not can_reissue(link, inviter):
                logfire.warn(
                    "Invitation of existing user refused",
                    provider=provider.value,
                    inviter_id=inviter_id,
                )
                raise InvitationConflictError(provider.value, request.external_id)

            if not link:
                try:
                    link = await self.identity_service.create_link(
                        provider,
                        CrmProfile(
                            provider=provider,
                            external_id=request.external_id,
                            email=request.email,
                            name=request.name,
                        ),
                    )
                except DuplicateProviderLinkError as e:
                    raise InvitationConflictError(
                        provider.value, request.external_id
                    ) from e

            invited = await self.invitation_service.issue(
                provider=provider,
                account_id=link.account_id,
                email=request.email,
                phone=request.phone.root,
                invited_by=inviter,
            )
            await self.unit_of_work.commit()

            return CreateInvitationResponse(
                account_id=str(invited.account_id),
                token=invited.invitation_token,
                expires_at=invited.invitation_expires_at,
            )
