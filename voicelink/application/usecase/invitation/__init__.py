"""Invitation use cases."""

from .accept_invitation import AcceptInvitationUseCase
from .create_invitation import CreateInvitationUseCase
from .remove_team_member import RemoveTeamMemberUseCase

__all__ = [
    "AcceptInvitationUseCase",
    "CreateInvitationUseCase",
    "RemoveTeamMemberUseCase",
]
