"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from voicelink.domain.model.account import Account
from voicelink.domain.value import AccountId


class AccountRepository(ABC):
    """Repository for Account entity.

    Accounts are created together with their first provider link, see
    ProviderLinkRepository.create_with_account.
    """

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID.

        Args:
            account_id: The account's unique identifier

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by email.

        Args:
            email: Account email (case-sensitive, stored as given)

        Returns:
            The account if found, None otherwise
        """
        pass
