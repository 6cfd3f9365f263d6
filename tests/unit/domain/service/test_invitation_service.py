"""Unit tests for InvitationService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from voicelink.domain.error import (
    NotFoundError,
    TokenExpiredError,
    TokenMismatchError,
)
from voicelink.domain.repository import ProviderLinkRepository, VerificationRepository
from voicelink.domain.service import IdentityService, InvitationService
from voicelink.domain.service.invitation_service import (
    can_reissue,
    effective_invitation_status,
)
from voicelink.domain.value import (
    AccountId,
    CrmProvider,
    InvitationStatus,
    WhatsAppStatus,
)
from tests.conftest import make_profile
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()

PROVIDER = CrmProvider.PIPEDRIVE


async def _invite(env, now=None, inviter=None):
    """Create a member account and issue an invitation for it."""
    identity_service = await env.get(IdentityService)
    invitation_service = await env.get(InvitationService)
    member = await identity_service.find_or_create_link(
        PROVIDER, make_profile(PROVIDER, external_id="pd-member")
    )
    inviter = inviter or AccountId(uuid4())
    link = await invitation_service.issue(
        provider=PROVIDER,
        account_id=member.account_id,
        email="member@example.com",
        phone="+3212345678",
        invited_by=inviter,
        now=now,
    )
    return link, inviter


class TestIssue:
    """Tests for issue."""

    @pytest.mark.asyncio
    async def test_issue_stamps_pending_invitation(self, unit_env):
        """Issuing sets a token, expiry and pending status on the link."""
        # Arrange
        now = datetime.now(timezone.utc)

        # Act
        link, inviter = await _invite(unit_env, now=now)

        # Assert
        assert link.invitation_token
        assert link.invitation_status == InvitationStatus.PENDING
        assert link.invitation_expires_at == now + timedelta(hours=72)
        assert link.invitation_phone == "+3212345678"
        assert link.invitation_email == "member@example.com"
        assert link.invited_by == inviter

    @pytest.mark.asyncio
    async def test_reissue_replaces_token(self, unit_env):
        """A second invitation invalidates the first token."""
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        first, inviter = await _invite(unit_env)
        second, _ = await _invite(unit_env, inviter=inviter)

        # Act & Assert
        assert first.invitation_token != second.invitation_token
        with pytest.raises(TokenMismatchError):
            await invitation_service.accept(
                PROVIDER, first.invitation_token, first.account_id
            )

    @pytest.mark.asyncio
    async def test_issue_keeps_original_inviter(self, unit_env):
        """Another account cannot take over an invited link."""
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        link_repos = await unit_env.get(dict[CrmProvider, ProviderLinkRepository])
        link, inviter = await _invite(unit_env)

        # Act
        with pytest.raises(NotFoundError):
            await invitation_service.issue(
                provider=PROVIDER,
                account_id=link.account_id,
                email="other@example.com",
                phone="+3298765432",
                invited_by=AccountId(uuid4()),
            )

        # Assert
        stored = await link_repos[PROVIDER].find_by_account_id(link.account_id)
        assert stored.invited_by == inviter
        assert stored.invitation_token == link.invitation_token


class TestCanReissue:
    """Tests for can_reissue."""

    @pytest.mark.asyncio
    async def test_pending_invitation_of_same_inviter(self, unit_env):
        # Arrange
        link, inviter = await _invite(unit_env)

        # Act & Assert
        assert can_reissue(link, inviter)
        assert not can_reissue(link, AccountId(uuid4()))

    @pytest.mark.asyncio
    async def test_accepted_invitation_cannot_be_reissued(self, unit_env):
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        link_repos = await unit_env.get(dict[CrmProvider, ProviderLinkRepository])
        link, inviter = await _invite(unit_env)
        await invitation_service.accept(
            PROVIDER, link.invitation_token, link.account_id
        )

        # Act
        accepted = await link_repos[PROVIDER].find_by_account_id(link.account_id)

        # Assert
        assert not can_reissue(accepted, inviter)

    @pytest.mark.asyncio
    async def test_self_registered_link_cannot_be_reissued(self, unit_env):
        # Arrange
        identity_service = await unit_env.get(IdentityService)
        link = await identity_service.find_or_create_link(
            PROVIDER, make_profile(PROVIDER, external_id="pd-self")
        )

        # Act & Assert
        assert not can_reissue(link, AccountId(uuid4()))


class TestAccept:
    """Tests for accept."""

    @pytest.mark.asyncio
    async def test_accept_stores_challenge(self, unit_env):
        """Accepting clears the token and stores a challenge for the invited phone."""
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        link_repos = await unit_env.get(dict[CrmProvider, ProviderLinkRepository])
        verification_repos = await unit_env.get(
            dict[CrmProvider, VerificationRepository]
        )
        link, _ = await _invite(unit_env)

        # Act
        challenge = await invitation_service.accept(
            PROVIDER, link.invitation_token, link.account_id
        )

        # Assert
        assert challenge.phone == "+3212345678"
        assert len(challenge.code) == 6
        stored = await verification_repos[PROVIDER].get_challenge(link.account_id)
        assert stored.code == challenge.code
        updated = await link_repos[PROVIDER].find_by_account_id(link.account_id)
        assert updated.invitation_token is None
        assert updated.invitation_status == InvitationStatus.ACCEPTED
        assert updated.whatsapp_status == WhatsAppStatus.PENDING

    @pytest.mark.asyncio
    async def test_token_of_other_account_is_mismatch(self, unit_env):
        """The token must belong to the redeeming account."""
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        link, _ = await _invite(unit_env)

        # Act & Assert
        with pytest.raises(TokenMismatchError):
            await invitation_service.accept(
                PROVIDER, link.invitation_token, AccountId(uuid4())
            )

    @pytest.mark.asyncio
    async def test_unknown_token_is_mismatch(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        link, _ = await _invite(unit_env)

        with pytest.raises(TokenMismatchError):
            await invitation_service.accept(PROVIDER, "not-a-token", link.account_id)

    @pytest.mark.asyncio
    async def test_expired_token_changes_nothing(self, unit_env):
        """A token one second past expiry is rejected and no challenge is stored."""
        # Arrange
        invitation_service = await unit_env.get(InvitationService)
        verification_repos = await unit_env.get(
            dict[CrmProvider, VerificationRepository]
        )
        link_repos = await unit_env.get(dict[CrmProvider, ProviderLinkRepository])
        now = datetime.now(timezone.utc)
        link, _ = await _invite(unit_env, now=now - timedelta(hours=72, seconds=1))

        # Act & Assert
        with pytest.raises(TokenExpiredError):
            await invitation_service.accept(
                PROVIDER, link.invitation_token, link.account_id, now=now
            )
        assert await verification_repos[PROVIDER].get_challenge(link.account_id) is None
        unchanged = await link_repos[PROVIDER].find_by_account_id(link.account_id)
        assert unchanged.invitation_token == link.invitation_token
        assert unchanged.invitation_status == InvitationStatus.PENDING

    @pytest.mark.asyncio
    async def test_token_is_single_use(self, unit_env):
        invitation_service = await unit_env.get(InvitationService)
        link, _ = await _invite(unit_env)
        await invitation_service.accept(PROVIDER, link.invitation_token, link.account_id)

        with pytest.raises(TokenMismatchError):
            await invitation_service.accept(
                PROVIDER, link.invitation_token, link.account_id
            )


class TestEffectiveInvitationStatus:
    """Tests for effective_invitation_status."""

    @pytest.mark.asyncio
    async def test_pending_past_expiry_reads_expired(self, unit_env):
        link, _ = await _invite(unit_env)
        later = link.invitation_expires_at + timedelta(seconds=1)

        assert effective_invitation_status(link, later) == InvitationStatus.EXPIRED

    @pytest.mark.asyncio
    async def test_pending_before_expiry_reads_pending(self, unit_env):
        link, _ = await _invite(unit_env)

        assert effective_invitation_status(link) == InvitationStatus.PENDING
