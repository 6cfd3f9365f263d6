"""PostgreSQL implementation of Account repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voicelink.domain.error import PersistenceError
from voicelink.domain.model import Account
from voicelink.domain.repository import AccountRepository
from voicelink.domain.value import AccountId
from voicelink.persistence.mappers import row_to_account
from voicelink.persistence.tables import accounts_table


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Get account by ID."""
        stmt = select(accounts_table).where(accounts_table.c.id == account_id)
        try:
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load account: {e}") from e
        return row_to_account(dict(row)) if row else None

    async def find_by_email(self, email: str) -> Optional[Account]:
        """Get account by email."""
        stmt = select(accounts_table).where(accounts_table.c.email == email)
        try:
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load account: {e}") from e
        return row_to_account(dict(row)) if row else None
