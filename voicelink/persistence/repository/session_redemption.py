"""PostgreSQL implementation of SessionRedemption repository."""

from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voicelink.domain.error import PersistenceError
from voicelink.domain.repository import SessionRedemptionRepository
from voicelink.domain.value import AccountId
from voicelink.persistence.tables import session_redemptions_table


class PostgresSessionRedemptionRepository(SessionRedemptionRepository):
    """PostgreSQL implementation of SessionRedemptionRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def consume(
        self, jti: str, account_id: AccountId, expires_at: datetime
    ) -> bool:
        """Insert the token ID; a conflict means it was already redeemed."""
        stmt = (
            insert(session_redemptions_table)
            .values(jti=jti, account_id=account_id, expires_at=expires_at)
            .on_conflict_do_nothing(index_elements=["jti"])
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to record session redemption: {e}") from e
        return result.rowcount == 1

    async def purge_expired(self, now: datetime) -> int:
        """Delete redemptions whose link has expired."""
        stmt = delete(session_redemptions_table).where(
            session_redemptions_table.c.expires_at < now
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to purge session redemptions: {e}") from e
        return result.rowcount
