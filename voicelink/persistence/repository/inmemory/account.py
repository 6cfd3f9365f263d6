"""In-memory account repository for testing."""

from typing import Optional

from voicelink.domain.model import Account
from voicelink.domain.repository import AccountRepository
from voicelink.domain.value import AccountId
from voicelink.persistence.repository.inmemory.store import InMemoryStore


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID."""
        return self.store.accounts.get(account_id)

    async def find_by_email(self, email: str) -> Optional[Account]:
        """Find an account by email."""
        for account in self.store.accounts.values():
            if account.email == email:
                return account
        return None
