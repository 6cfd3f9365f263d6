"""PostgreSQL implementation of Invitation repository."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voicelink.domain.error import NotFoundError, PersistenceError, TokenMismatchError
from voicelink.domain.model import ProviderLink
from voicelink.domain.repository import InvitationRepository
from voicelink.domain.value import (
    AccountId,
    CrmProvider,
    InvitationStatus,
    WhatsAppStatus,
)
from voicelink.persistence.mappers import row_to_provider_link
from voicelink.persistence.tables import PROVIDER_TABLES


class PostgresInvitationRepository(InvitationRepository):
    """PostgreSQL implementation of InvitationRepository."""

    def __init__(self, session: AsyncSession, provider: CrmProvider) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            provider: CRM provider whose table this repository writes
        """
        self.session = session
        self.provider = provider
        self.table = PROVIDER_TABLES[provider]

    async def issue(
        self,
        account_id: AccountId,
        token: str,
        expires_at: datetime,
        email: str | None,
        phone: str,
        invited_by: AccountId,
    ) -> ProviderLink:
        """Stamp a pending invitation on the account's link."""
        stmt = (
            update(self.table)
            .where(
                self.table.c.account_id == account_id,
                self.table.c.deleted_at.is_(None),
                or_(
                    self.table.c.invited_by.is_(None),
                    self.table.c.invited_by == invited_by,
                ),
            )
            .values(
                invitation_token=token,
                invitation_token_expires_at=expires_at,
                invitation_status=InvitationStatus.PENDING.value,
                invitation_email=email,
                invitation_phone=phone,
                invited_by=invited_by,
                updated_at=datetime.now(timezone.utc),
            )
            .returning(self.table)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to issue invitation: {e}") from e

        row = result.mappings().first()
        if not row:
            raise NotFoundError(f"{self.provider.value} link", str(account_id))
        return row_to_provider_link(dict(row), self.provider)

    async def find_by_token(
        self, token: str, account_id: AccountId
    ) -> Optional[ProviderLink]:
        """Get the link holding the token for the given account."""
        stmt = select(self.table).where(
            self.table.c.invitation_token == token,
            self.table.c.account_id == account_id,
            self.table.c.deleted_at.is_(None),
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read invitation: {e}") from e

        row = result.mappings().first()
        return row_to_provider_link(dict(row), self.provider) if row else None

    async def accept_with_challenge(
        self,
        account_id: AccountId,
        token: str,
        phone: str,
        code: str,
        otp_expires_at: datetime,
    ) -> None:
        """Clear the token, accept, and store the challenge in one UPDATE."""
        stmt = (
            update(self.table)
            .where(
                self.table.c.account_id == account_id,
                self.table.c.invitation_token == token,
                self.table.c.deleted_at.is_(None),
            )
            .values(
                invitation_token=None,
                invitation_token_expires_at=None,
                invitation_status=InvitationStatus.ACCEPTED.value,
                whatsapp_otp_code=code,
                whatsapp_otp_phone=phone,
                whatsapp_otp_expires_at=otp_expires_at,
                whatsapp_status=WhatsAppStatus.PENDING.value,
                updated_at=datetime.now(timezone.utc),
            )
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to accept invitation: {e}") from e

        if result.rowcount == 0:
            raise TokenMismatchError()
