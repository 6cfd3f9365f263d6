"""Database failures surface as PersistenceError."""

from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from voicelink.domain.error import PersistenceError
from voicelink.domain.value import AccountId, CrmProvider
from voicelink.persistence.repository import (
    PostgresAccountRepository,
    PostgresProviderLinkRepository,
    PostgresUnitOfWork,
)


class BrokenSession:
    """Session whose connection dropped."""

    async def execute(self, stmt):
        raise OperationalError("SELECT", {}, ConnectionError("connection lost"))


class TestReadFailures:
    """Tests for read paths of the PostgreSQL repositories."""

    @pytest.mark.asyncio
    async def test_account_lookup_by_id(self):
        repository = PostgresAccountRepository(BrokenSession())

        with pytest.raises(PersistenceError, match="Failed to load account"):
            await repository.find_by_id(AccountId(uuid4()))

    @pytest.mark.asyncio
    async def test_account_lookup_by_email(self):
        repository = PostgresAccountRepository(BrokenSession())

        with pytest.raises(PersistenceError):
            await repository.find_by_email("ann@example.com")

    @pytest.mark.asyncio
    async def test_link_lookup_by_external_id(self):
        repository = PostgresProviderLinkRepository(
            BrokenSession(), CrmProvider.PIPEDRIVE
        )

        with pytest.raises(PersistenceError, match="Failed to load provider link"):
            await repository.find_active_by_external_id("pd-1")

    @pytest.mark.asyncio
    async def test_link_lookup_by_account(self):
        repository = PostgresProviderLinkRepository(
            BrokenSession(), CrmProvider.TEAMLEADER
        )

        with pytest.raises(PersistenceError):
            await repository.find_by_account_id(AccountId(uuid4()))


class FailingCommitSession:
    def __init__(self) -> None:
        self.rolled_back = False

    async def commit(self):
        raise OperationalError("COMMIT", {}, ConnectionError("connection lost"))

    async def rollback(self):
        self.rolled_back = True


class TestCommitFailure:
    """Tests for PostgresUnitOfWork.commit."""

    @pytest.mark.asyncio
    async def test_failed_commit_rolls_back(self):
        session = FailingCommitSession()
        unit_of_work = PostgresUnitOfWork(session)

        with pytest.raises(PersistenceError, match="Failed to commit"):
            await unit_of_work.commit()

        assert session.rolled_back
