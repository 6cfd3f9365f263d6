"""Unit tests for IdentityService."""

from uuid import uuid4

import pytest

from voicelink.domain.error import AccountCreationError, NotFoundError
from voicelink.domain.model import Account, ProviderLink
from voicelink.domain.repository import AccountRepository, ProviderLinkRepository
from voicelink.domain.service import IdentityService, SessionService
from voicelink.domain.value import AccountId, CrmProvider
from voicelink.persistence.repository.inmemory import (
    InMemoryProviderLinkRepository,
    InMemoryStore,
)
from tests.conftest import make_profile
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


class RacingProviderLinkRepository(InMemoryProviderLinkRepository):
    """Link repository where a concurrent request always wins the insert.

    On create, a competing account and link for the same external ID are
    stored first, so the insert fails with DuplicateProviderLinkError.
    """

    def __init__(self, store: InMemoryStore, provider: CrmProvider) -> None:
        super().__init__(store, provider)
        self.winner: ProviderLink | None = None

    async def create_with_account(
        self, account: Account, link: ProviderLink
    ) -> ProviderLink:
        if self.winner is None:
            other = Account(id=AccountId(uuid4()), email=f"winner-{account.email}")
            self.winner = link.model_copy(
                update={"id": uuid4(), "account_id": other.id}
            )
            await super().create_with_account(other, self.winner)
        return await super().create_with_account(account, link)


class TestResolve:
    """Tests for resolve."""

    @pytest.mark.asyncio
    async def test_first_login_creates_account(self, unit_env):
        """A new CRM user gets a fresh account and a magic link."""
        # Arrange
        identity_service = await unit_env.get(IdentityService)
        account_repo = await unit_env.get(AccountRepository)
        profile = make_profile(external_id="tl-1", email="ann@example.com")

        # Act
        handle = await identity_service.resolve(CrmProvider.TEAMLEADER, profile)

        # Assert
        account = await account_repo.find_by_id(handle.account_id)
        assert account is not None
        assert account.email == "ann@example.com"
        assert account.display_name == "Test User"
        assert handle.email == "ann@example.com"
        assert "/auth/session?token=" in handle.session_url

    @pytest.mark.asyncio
    async def test_repeat_login_resolves_same_account(self, unit_env):
        """Resolving the same external user twice yields one account."""
        # Arrange
        identity_service = await unit_env.get(IdentityService)
        profile = make_profile(external_id="tl-1", email="ann@example.com")

        # Act
        first = await identity_service.resolve(CrmProvider.TEAMLEADER, profile)
        second = await identity_service.resolve(CrmProvider.TEAMLEADER, profile)

        # Assert
        assert first.account_id == second.account_id
        assert first.session_url != second.session_url

    @pytest.mark.asyncio
    async def test_repeat_login_refreshes_profile(self, unit_env):
        """The stored profile snapshot is overwritten on every login."""
        # Arrange
        identity_service = await unit_env.get(IdentityService)
        link_repos = await unit_env.get(dict[CrmProvider, ProviderLinkRepository])
        await identity_service.resolve(
            CrmProvider.PIPEDRIVE, make_profile(CrmProvider.PIPEDRIVE, "pd-7", name="Old")
        )

        # Act
        await identity_service.resolve(
            CrmProvider.PIPEDRIVE, make_profile(CrmProvider.PIPEDRIVE, "pd-7", name="New")
        )

        # Assert
        link = await link_repos[CrmProvider.PIPEDRIVE].find_active_by_external_id("pd-7")
        assert link.profile["name"] == "New"

    @pytest.mark.asyncio
    async def test_missing_email_gets_placeholder(self, unit_env):
        """Users of CRMs that share no email get a provider-scoped placeholder."""
        # Arrange
        identity_service = await unit_env.get(IdentityService)
        profile = make_profile(CrmProvider.ODOO, external_id="42", email=None)

        # Act
        handle = await identity_service.resolve(CrmProvider.ODOO, profile)

        # Assert
        assert handle.email == "42@odoo.local"

    @pytest.mark.asyncio
    async def test_same_external_id_on_other_provider_is_another_account(
        self, unit_env
    ):
        """External IDs are scoped to their provider."""
        # Arrange
        identity_service = await unit_env.get(IdentityService)

        # Act
        teamleader = await identity_service.resolve(
            CrmProvider.TEAMLEADER, make_profile(CrmProvider.TEAMLEADER, "7")
        )
        pipedrive = await identity_service.resolve(
            CrmProvider.PIPEDRIVE, make_profile(CrmProvider.PIPEDRIVE, "7")
        )

        # Assert
        assert teamleader.account_id != pipedrive.account_id

    @pytest.mark.asyncio
    async def test_email_taken_by_other_account_fails(self, unit_env):
        """An email owned by another account cannot be reused."""
        # Arrange
        identity_service = await unit_env.get(IdentityService)
        await identity_service.resolve(
            CrmProvider.TEAMLEADER,
            make_profile(CrmProvider.TEAMLEADER, "tl-1", email="ann@example.com"),
        )

        # Act & Assert
        with pytest.raises(AccountCreationError):
            await identity_service.resolve(
                CrmProvider.PIPEDRIVE,
                make_profile(CrmProvider.PIPEDRIVE, "pd-1", email="ann@example.com"),
            )

    @pytest.mark.asyncio
    async def test_lost_creation_race_reuses_winner(self, unit_env):
        """When a concurrent request creates the link first, its account is used."""
        # Arrange
        store = await unit_env.get(InMemoryStore)
        session_service = await unit_env.get(SessionService)
        account_repo = await unit_env.get(AccountRepository)
        racing_repo = RacingProviderLinkRepository(store, CrmProvider.TEAMLEADER)
        identity_service = IdentityService(
            provider_link_repositories={CrmProvider.TEAMLEADER: racing_repo},
            account_repository=account_repo,
            session_service=session_service,
        )
        profile = make_profile(CrmProvider.TEAMLEADER, "tl-race", email="race@example.com")

        # Act
        handle = await identity_service.resolve(CrmProvider.TEAMLEADER, profile)

        # Assert
        assert handle.account_id == racing_repo.winner.account_id
        active = [
            link
            for link in store.links[CrmProvider.TEAMLEADER]
            if link.external_id == "tl-race" and not link.is_deleted
        ]
        assert len(active) == 1


class TestGetLink:
    """Tests for get_link."""

    @pytest.mark.asyncio
    async def test_unknown_account_raises_not_found(self, unit_env):
        identity_service = await unit_env.get(IdentityService)

        with pytest.raises(NotFoundError):
            await identity_service.get_link(CrmProvider.TEAMLEADER, AccountId(uuid4()))


class TestRemoveTeamMember:
    """Tests for remove_team_member."""

    @pytest.mark.asyncio
    async def test_inviter_can_remove_member(self, unit_env):
        """The inviting account can soft-delete the member's link."""
        # Arrange
        identity_service = await unit_env.get(IdentityService)
        link_repos = await unit_env.get(dict[CrmProvider, ProviderLinkRepository])
        store = await unit_env.get(InMemoryStore)
        inviter = AccountId(uuid4())
        member = await identity_service.find_or_create_link(
            CrmProvider.TEAMLEADER, make_profile(external_id="tl-member")
        )
        store.replace_link(member.model_copy(update={"invited_by": inviter}))

        # Act
        await identity_service.remove_team_member(
            CrmProvider.TEAMLEADER, member.account_id, inviter
        )

        # Assert
        repo = link_repos[CrmProvider.TEAMLEADER]
        assert await repo.find_by_account_id(member.account_id) is None
        assert await repo.find_active_by_external_id("tl-member") is None

    @pytest.mark.asyncio
    async def test_other_account_cannot_remove_member(self, unit_env):
        """Only the inviting account may remove a member."""
        # Arrange
        identity_service = await unit_env.get(IdentityService)
        store = await unit_env.get(InMemoryStore)
        member = await identity_service.find_or_create_link(
            CrmProvider.TEAMLEADER, make_profile(external_id="tl-member")
        )
        store.replace_link(
            member.model_copy(update={"invited_by": AccountId(uuid4())})
        )

        # Act & Assert
        with pytest.raises(NotFoundError, match="Team member"):
            await identity_service.remove_team_member(
                CrmProvider.TEAMLEADER, member.account_id, AccountId(uuid4())
            )
