"""Invitation routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, status

from voicelink.application.usecase.invitation import (
    AcceptInvitationUseCase,
    CreateInvitationUseCase,
    RemoveTeamMemberUseCase,
)
from voicelink.application.usecase.invitation.accept_invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
)
from voicelink.application.usecase.invitation.create_invitation import (
    CreateInvitationRequest,
    CreateInvitationResponse,
)
from voicelink.application.usecase.invitation.remove_team_member import (
    RemoveTeamMemberRequest,
    RemoveTeamMemberResponse,
)
from voicelink.domain.service import JWTService
from voicelink.domain.value import CrmProvider
from voicelink.interface.api.auth import require_session

router = APIRouter(
    prefix="/invitations", tags=["invitations"], route_class=DishkaRoute
)


@router.post(
    "",
    response_model=CreateInvitationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_invitation(
    request: CreateInvitationRequest,
    create_invitation_use_case: FromDishka[CreateInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> CreateInvitationResponse:
    """Invite a CRM teammate.

    The inviter must be signed in through the same CRM.

    Example:
        POST /invitations
        {
            "provider": "pipedrive",
            "external_id": "12345",
            "email": "sam@example.com",
            "name": "Sam",
            "phone": "+3212345678"
        }
    """
    payload = require_session(auth_token, jwt_service)
    return await create_invitation_use_case.execute(request, payload.account_id)


@router.post("/accept", response_model=AcceptInvitationResponse)
async def accept_invitation(
    request: AcceptInvitationRequest,
    accept_invitation_use_case: FromDishka[AcceptInvitationUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> AcceptInvitationResponse:
    """Accept an invitation as the signed-in teammate.

    A verification code is sent to the invited number; if sending fails the
    invitation is still accepted and the teammate can request a new code.
    """
    payload = require_session(auth_token, jwt_service)
    return await accept_invitation_use_case.execute(request, payload.account_id)


@router.delete(
    "/members/{provider}/{account_id}", response_model=RemoveTeamMemberResponse
)
async def remove_team_member(
    provider: CrmProvider,
    account_id: UUID,
    remove_team_member_use_case: FromDishka[RemoveTeamMemberUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> RemoveTeamMemberResponse:
    """Remove a teammate the signed-in account invited."""
    payload = require_session(auth_token, jwt_service)
    return await remove_team_member_use_case.execute(
        RemoveTeamMemberRequest(provider=provider, account_id=account_id),
        payload.account_id,
    )
