"""Identity resolution domain service."""

from datetime import datetime, timezone
from uuid import uuid4

import logfire

from voicelink.domain.error import DuplicateProviderLinkError, NotFoundError
from voicelink.domain.model import Account, ProviderLink, SessionHandle
from voicelink.domain.repository import AccountRepository, ProviderLinkRepository
from voicelink.domain.value import AccountId, CrmProfile, CrmProvider, ProviderLinkId

from .base import Service
from .session_service import SessionService


def placeholder_email(provider: CrmProvider, external_id: str) -> str:
    """Stable email for CRM users whose provider does not share one."""
    return f"{external_id}@{provider.value}.local"


class IdentityService(Service):
    """Reconciles CRM identities with internal accounts.

    Each (provider, external_id) maps to exactly one account. Creation relies
    on the unique index of the provider table: losing a creation race is
    resolved by re-reading the link the other request created.
    """

    def __init__(
        self,
        provider_link_repositories: dict[CrmProvider, ProviderLinkRepository],
        account_repository: AccountRepository,
        session_service: SessionService,
    ) -> None:
        """Initialize identity service.

        Args:
            provider_link_repositories: Link repository per CRM provider
            account_repository: Account repository
            session_service: Magic link issuer
        """
        self.provider_link_repositories = provider_link_repositories
        self.account_repository = account_repository
        self.session_service = session_service

    async def resolve(self, provider: CrmProvider, profile: CrmProfile) -> SessionHandle:
        """Resolve a CRM profile to an account and issue a magic link.

        Args:
            provider: CRM provider the profile came from
            profile: Freshly fetched CRM profile

        Returns:
            Session handle for the resolved account

        Raises:
            AccountCreationError: If a new account cannot be created
            SessionIssuanceError: If the magic link cannot be issued
        """
        with logfire.span(
            "identity_service.resolve",
            provider=provider.value,
            external_id=profile.external_id,
        ):
            link = await self.find_or_create_link(provider, profile)
            account = await self.account_repository.find_by_id(link.account_id)
            if not account:
                raise NotFoundError("Account", str(link.account_id))
            return self.session_service.issue(account)

    async def find_or_create_link(
        self, provider: CrmProvider, profile: CrmProfile
    ) -> ProviderLink:
        """Return the active link for a CRM user, creating it if needed.

        An existing link gets its profile snapshot overwritten.

        Args:
            provider: CRM provider the profile came from
            profile: CRM profile

        Returns:
            Active provider link

        Raises:
            AccountCreationError: If a new account cannot be created
        """
        repository = self.provider_link_repositories[provider]

        link = await repository.find_active_by_external_id(profile.external_id)
        if link:
            logfire.info(
                "Existing provider link found",
                provider=provider.value,
                account_id=str(link.account_id),
            )
            return await repository.update_profile(link.id, profile.raw)

        try:
            return await self.create_link(provider, profile)
        except DuplicateProviderLinkError:
            existing = await repository.find_active_by_external_id(profile.external_id)
            if not existing:
                raise
            logfire.info(
                "Lost creation race, reusing provider link",
                provider=provider.value,
                account_id=str(existing.account_id),
            )
            return await repository.update_profile(existing.id, profile.raw)

    async def create_link(
        self, provider: CrmProvider, profile: CrmProfile
    ) -> ProviderLink:
        """Create a new account and its link for a CRM user.

        Raises:
            DuplicateProviderLinkError: If an active link for the CRM user
                already exists
            AccountCreationError: If the account cannot be created
        """
        now = datetime.now(timezone.utc)
        account = Account(
            id=AccountId(uuid4()),
            email=profile.email or placeholder_email(provider, profile.external_id),
            display_name=profile.name,
            created_at=now,
        )
        new_link = ProviderLink(
            id=ProviderLinkId(uuid4()),
            account_id=account.id,
            provider=provider,
            external_id=profile.external_id,
            profile=profile.raw,
            created_at=now,
            updated_at=now,
        )

        created = await self.provider_link_repositories[
            provider
        ].create_with_account(account, new_link)
        logfire.info(
            "New account created",
            provider=provider.value,
            account_id=str(account.id),
            placeholder_email=profile.email is None,
        )
        return created

    async def find_link_by_external_id(
        self, provider: CrmProvider, external_id: str
    ) -> ProviderLink | None:
        """Get the active link of a CRM user, if any."""
        return await self.provider_link_repositories[
            provider
        ].find_active_by_external_id(external_id)

    async def get_account(self, account_id: AccountId) -> Account:
        """Get an account by ID.

        Raises:
            NotFoundError: If the account does not exist
        """
        account = await self.account_repository.find_by_id(account_id)
        if not account:
            raise NotFoundError("Account", str(account_id))
        return account

    async def get_links(self, account_id: AccountId) -> list[ProviderLink]:
        """Get the account's active links across all providers."""
        links = []
        for repository in self.provider_link_repositories.values():
            link = await repository.find_by_account_id(account_id)
            if link:
                links.append(link)
        return links

    async def remove_team_member(
        self,
        provider: CrmProvider,
        account_id: AccountId,
        removed_by: AccountId,
    ) -> None:
        """Soft-delete a member the caller invited.

        Deleted links are ignored by every lookup.

        Raises:
            NotFoundError: If the member does not exist or was invited by
                someone else
        """
        with logfire.span(
            "identity_service.remove_team_member",
            provider=provider.value,
            account_id=str(account_id),
            removed_by=str(removed_by),
        ):
            removed = await self.provider_link_repositories[
                provider
            ].soft_delete_member(account_id, removed_by)
            if not removed:
                raise NotFoundError("Team member", str(account_id))
            logfire.info(
                "Team member removed",
                provider=provider.value,
                account_id=str(account_id),
            )

    async def get_link(
        self, provider: CrmProvider, account_id: AccountId
    ) -> ProviderLink:
        """Get the account's active link for one provider.

        Raises:
            NotFoundError: If the account has no link for the provider
        """
        link = await self.provider_link_repositories[provider].find_by_account_id(
            account_id
        )
        if not link:
            raise NotFoundError(f"{provider.value} link", str(account_id))
        return link
