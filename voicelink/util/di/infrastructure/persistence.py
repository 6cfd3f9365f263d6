"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from voicelink.config import Settings
from voicelink.domain.repository import (
    AccountRepository,
    InvitationRepository,
    ProviderLinkRepository,
    SessionRedemptionRepository,
    UnitOfWork,
    VerificationRepository,
)
from voicelink.domain.value import CrmProvider
from voicelink.persistence.database import create_engine, create_session_factory
from voicelink.persistence.repository import (
    PostgresAccountRepository,
    PostgresInvitationRepository,
    PostgresProviderLinkRepository,
    PostgresSessionRedemptionRepository,
    PostgresUnitOfWork,
    PostgresVerificationRepository,
)
from voicelink.util.di.base import ProviderBase
from voicelink.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL.

    Per-provider repositories are handed out as dictionaries keyed by
    CrmProvider, one repository per provider table.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_engine(self, settings: Settings) -> AsyncEngine:
        """Provide database engine."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        return engine

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.REQUEST)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterator[AsyncSession]:
        """Provide database session for request scope.

        Use cases commit through the UnitOfWork before they report success.
        Closing the session at the end of the request rolls back whatever
        is left uncommitted, including writes of a request that failed.
        """
        async with session_factory() as session:
            yield session

    @provide(scope=Scope.REQUEST)
    def get_unit_of_work(self, session: AsyncSession) -> UnitOfWork:
        """Provide unit of work over the request's session."""
        return PostgresUnitOfWork(session)

    @provide(scope=Scope.REQUEST)
    def get_account_repository(self, session: AsyncSession) -> AccountRepository:
        """Provide Account repository."""
        return PostgresAccountRepository(session)

    @provide(scope=Scope.REQUEST)
    def get_provider_link_repositories(
        self, session: AsyncSession
    ) -> dict[CrmProvider, ProviderLinkRepository]:
        """Provide ProviderLink repository per CRM provider."""
        return {
            provider: PostgresProviderLinkRepository(session, provider)
            for provider in CrmProvider
        }

    @provide(scope=Scope.REQUEST)
    def get_verification_repositories(
        self, session: AsyncSession
    ) -> dict[CrmProvider, VerificationRepository]:
        """Provide Verification repository per CRM provider."""
        return {
            provider: PostgresVerificationRepository(session, provider)
            for provider in CrmProvider
        }

    @provide(scope=Scope.REQUEST)
    def get_invitation_repositories(
        self, session: AsyncSession
    ) -> dict[CrmProvider, InvitationRepository]:
        """Provide Invitation repository per CRM provider."""
        return {
            provider: PostgresInvitationRepository(session, provider)
            for provider in CrmProvider
        }

    @provide(scope=Scope.REQUEST)
    def get_session_redemption_repository(
        self, session: AsyncSession
    ) -> SessionRedemptionRepository:
        """Provide SessionRedemption repository."""
        return PostgresSessionRedemptionRepository(session)
