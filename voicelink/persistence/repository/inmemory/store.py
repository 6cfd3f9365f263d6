"""Shared in-memory storage for the in-memory repositories."""

from datetime import datetime

from voicelink.domain.model import Account, ProviderLink
from voicelink.domain.value import AccountId, CrmProvider


class InMemoryStore:
    """Tables held in memory.

    Repositories for different concerns share one store so that, as with the
    provider tables, a challenge written by one repository is visible to the
    others.
    """

    def __init__(self) -> None:
        self.accounts: dict[AccountId, Account] = {}
        self.links: dict[CrmProvider, list[ProviderLink]] = {
            provider: [] for provider in CrmProvider
        }
        self.redemptions: dict[str, tuple[AccountId, datetime]] = {}
        self.commits = 0

    def active_link(
        self, provider: CrmProvider, account_id: AccountId
    ) -> ProviderLink | None:
        """Return the non-deleted link of an account for a provider."""
        for link in self.links[provider]:
            if link.account_id == account_id and not link.is_deleted:
                return link
        return None

    def replace_link(self, link: ProviderLink) -> ProviderLink:
        """Replace a stored link by ID."""
        links = self.links[link.provider]
        for i, existing in enumerate(links):
            if existing.id == link.id:
                links[i] = link
                return link
        raise KeyError(link.id)
