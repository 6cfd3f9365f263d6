"""Mock persistence providers for testing."""

from dishka import Scope, provide

from voicelink.domain.repository import (
    AccountRepository,
    InvitationRepository,
    ProviderLinkRepository,
    SessionRedemptionRepository,
    UnitOfWork,
    VerificationRepository,
)
from voicelink.domain.value import CrmProvider
from voicelink.persistence.repository.inmemory import (
    InMemoryAccountRepository,
    InMemoryInvitationRepository,
    InMemoryProviderLinkRepository,
    InMemorySessionRedemptionRepository,
    InMemoryStore,
    InMemoryUnitOfWork,
    InMemoryVerificationRepository,
)
from voicelink.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    The store is APP-scoped so state survives across requests of one
    container; each test builds its own container.
    """

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_store(self) -> InMemoryStore:
        """Provide shared in-memory store."""
        return InMemoryStore()

    @provide(scope=Scope.REQUEST)
    def get_account_repository(self, store: InMemoryStore) -> AccountRepository:
        """Provide in-memory account repository."""
        return InMemoryAccountRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_provider_link_repositories(
        self, store: InMemoryStore
    ) -> dict[CrmProvider, ProviderLinkRepository]:
        """Provide in-memory link repository per CRM provider."""
        return {
            provider: InMemoryProviderLinkRepository(store, provider)
            for provider in CrmProvider
        }

    @provide(scope=Scope.REQUEST)
    def get_verification_repositories(
        self, store: InMemoryStore
    ) -> dict[CrmProvider, VerificationRepository]:
        """Provide in-memory verification repository per CRM provider."""
        return {
            provider: InMemoryVerificationRepository(store, provider)
            for provider in CrmProvider
        }

    @provide(scope=Scope.REQUEST)
    def get_invitation_repositories(
        self, store: InMemoryStore
    ) -> dict[CrmProvider, InvitationRepository]:
        """Provide in-memory invitation repository per CRM provider."""
        return {
            provider: InMemoryInvitationRepository(store, provider)
            for provider in CrmProvider
        }

    @provide(scope=Scope.REQUEST)
    def get_session_redemption_repository(
        self, store: InMemoryStore
    ) -> SessionRedemptionRepository:
        """Provide in-memory session redemption repository."""
        return InMemorySessionRedemptionRepository(store)

    @provide(scope=Scope.REQUEST)
    def get_unit_of_work(self, store: InMemoryStore) -> UnitOfWork:
        """Provide in-memory unit of work."""
        return InMemoryUnitOfWork(store)
