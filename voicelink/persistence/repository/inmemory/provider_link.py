"""In-memory provider link repository for testing."""

from datetime import datetime, timezone
from typing import Any, Optional

from voicelink.domain.error import (
    AccountCreationError,
    DuplicateProviderLinkError,
    NotFoundError,
)
from voicelink.domain.model import Account, ProviderLink
from voicelink.domain.repository import ProviderLinkRepository
from voicelink.domain.value import AccountId, CrmProvider, ProviderLinkId
from voicelink.persistence.repository.inmemory.store import InMemoryStore


class InMemoryProviderLinkRepository(ProviderLinkRepository):
    """In-memory implementation of ProviderLinkRepository for testing.

    Enforces the same uniqueness rules as the database: one active link per
    external ID and one account per email.
    """

    def __init__(self, store: InMemoryStore, provider: CrmProvider) -> None:
        self.store = store
        self.provider = provider

    async def find_active_by_external_id(
        self, external_id: str
    ) -> Optional[ProviderLink]:
        """Find the non-deleted link for an external user."""
        for link in self.store.links[self.provider]:
            if link.external_id == external_id and not link.is_deleted:
                return link
        return None

    async def find_by_account_id(self, account_id: AccountId) -> Optional[ProviderLink]:
        """Find the non-deleted link bound to an account."""
        return self.store.active_link(self.provider, account_id)

    async def create_with_account(
        self, account: Account, link: ProviderLink
    ) -> ProviderLink:
        """Create account and link, all or nothing.

        Raises:
            DuplicateProviderLinkError: If an active link for the external ID exists
            AccountCreationError: If the email is already taken
        """
        if await self.find_active_by_external_id(link.external_id):
            raise DuplicateProviderLinkError(self.provider.value, link.external_id)

        for existing in self.store.accounts.values():
            if existing.email == account.email or existing.id == account.id:
                raise AccountCreationError(
                    f"Could not create account for {self.provider.value}:{link.external_id}"
                )

        self.store.accounts[account.id] = account
        self.store.links[self.provider].append(link)
        return link

    async def update_profile(
        self, link_id: ProviderLinkId, profile: dict[str, Any]
    ) -> ProviderLink:
        """Overwrite the profile snapshot of a link."""
        for link in self.store.links[self.provider]:
            if link.id == link_id:
                return self.store.replace_link(
                    link.model_copy(
                        update={
                            "profile": profile,
                            "updated_at": datetime.now(timezone.utc),
                        }
                    )
                )
        raise NotFoundError("ProviderLink", str(link_id))

    async def soft_delete_member(
        self, account_id: AccountId, invited_by: AccountId
    ) -> bool:
        """Mark the member's active link deleted."""
        link = self.store.active_link(self.provider, account_id)
        if not link or link.invited_by != invited_by:
            return False
        now = datetime.now(timezone.utc)
        self.store.replace_link(
            link.model_copy(update={"deleted_at": now, "updated_at": now})
        )
        return True
