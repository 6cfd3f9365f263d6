"""PostgreSQL unit of work."""

import logfire
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voicelink.domain.error import PersistenceError
from voicelink.domain.repository import UnitOfWork


class PostgresUnitOfWork(UnitOfWork):
    """Commits the request's database session."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize with the request's database session.

        Args:
            session: SQLAlchemy async session shared with the repositories
        """
        self.session = session

    async def commit(self) -> None:
        """Commit the session; the next statement opens a new transaction."""
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise PersistenceError(f"Failed to commit: {e}") from e
        logfire.info("Session committed")
