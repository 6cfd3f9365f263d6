"""Remove team member use case."""

from uuid import UUID

from pydantic import BaseModel

from voicelink.domain.repository import UnitOfWork
from voicelink.domain.service import IdentityService
from voicelink.domain.value import AccountId, CrmProvider


class RemoveTeamMemberRequest(BaseModel):
    """Remove team member request."""

    provider: CrmProvider
    account_id: UUID


class RemoveTeamMemberResponse(BaseModel):
    """Remove team member response."""

    success: bool = True


class RemoveTeamMemberUseCase:
    """Use case for removing a teammate the caller invited."""

    def __init__(
        self, identity_service: IdentityService, unit_of_work: UnitOfWork
    ) -> None:
        self.identity_service = identity_service
        self.unit_of_work = unit_of_work

    async def execute(
        self, request: RemoveTeamMemberRequest, removed_by: str
    ) -> RemoveTeamMemberResponse:
        """Soft-delete the member's link.

        Raises:
            NotFoundError: If the member does not exist or was invited by
                someone else
        """
        await self.identity_service.remove_team_member(
            request.provider,
            AccountId(request.account_id),
            AccountId(UUID(removed_by)),
        )
        await self.unit_of_work.commit()
        return RemoveTeamMemberResponse()
