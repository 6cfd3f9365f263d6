"""In-memory unit of work for testing."""

from voicelink.domain.repository import UnitOfWork
from voicelink.persistence.repository.inmemory.store import InMemoryStore


class InMemoryUnitOfWork(UnitOfWork):
    """Counts commits; in-memory writes are visible immediately."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def commit(self) -> None:
        self.store.commits += 1
