"""Provider link repository interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from voicelink.domain.model.account import Account
from voicelink.domain.model.provider_link import ProviderLink
from voicelink.domain.value import AccountId, CrmProvider, ProviderLinkId


class ProviderLinkRepository(ABC):
    """Repository for the links of one CRM provider.

    One instance exists per CrmProvider; each is backed by its own table.
    """

    provider: CrmProvider

    @abstractmethod
    async def find_active_by_external_id(
        self, external_id: str
    ) -> Optional[ProviderLink]:
        """Find the non-deleted link for an external user.

        Args:
            external_id: The user's ID on the CRM

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_account_id(self, account_id: AccountId) -> Optional[ProviderLink]:
        """Find the non-deleted link bound to an account.

        Args:
            account_id: The account's unique identifier

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def create_with_account(
        self, account: Account, link: ProviderLink
    ) -> ProviderLink:
        """Create an account and its provider link atomically.

        Either both rows are written or neither is.

        Args:
            account: New account
            link: New link bound to ``account``

        Returns:
            The created link

        Raises:
            DuplicateProviderLinkError: If an active link for the external ID
                already exists (created concurrently)
            AccountCreationError: On any other uniqueness violation
            PersistenceError: On storage failure
        """
        pass

    @abstractmethod
    async def update_profile(
        self, link_id: ProviderLinkId, profile: dict[str, Any]
    ) -> ProviderLink:
        """Overwrite the stored profile snapshot.

        Args:
            link_id: Link to update
            profile: Latest raw profile from the CRM

        Returns:
            The updated link

        Raises:
            NotFoundError: If the link does not exist
        """
        pass

    @abstractmethod
    async def soft_delete_member(
        self, account_id: AccountId, invited_by: AccountId
    ) -> bool:
        """Soft-delete an invited member's link.

        Only the link of ``account_id`` that was invited by ``invited_by`` is
        affected.

        Args:
            account_id: Member whose link is removed
            invited_by: Account that issued the invitation

        Returns:
            True if a link was deleted, False if no such member exists
        """
        pass
