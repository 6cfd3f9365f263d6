"""In-memory repository implementations for testing."""

from .account import InMemoryAccountRepository
from .invitation import InMemoryInvitationRepository
from .provider_link import InMemoryProviderLinkRepository
from .session_redemption import InMemorySessionRedemptionRepository
from .store import InMemoryStore
from .unit_of_work import InMemoryUnitOfWork
from .verification import InMemoryVerificationRepository

__all__ = [
    "InMemoryAccountRepository",
    "InMemoryInvitationRepository",
    "InMemoryProviderLinkRepository",
    "InMemorySessionRedemptionRepository",
    "InMemoryStore",
    "InMemoryUnitOfWork",
    "InMemoryVerificationRepository",
]
