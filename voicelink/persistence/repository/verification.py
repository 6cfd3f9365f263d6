"""PostgreSQL implementation of Verification repository."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import case, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voicelink.domain.error import NoPendingChallengeError, NotFoundError, PersistenceError
from voicelink.domain.model import OtpChallenge
from voicelink.domain.repository import VerificationRepository
from voicelink.domain.value import (
    AccountId,
    CrmProvider,
    WhatsAppStatus,
    WhatsAppVerification,
)
from voicelink.persistence.mappers import row_to_otp_challenge
from voicelink.persistence.tables import PROVIDER_TABLES


class PostgresVerificationRepository(VerificationRepository):
    """PostgreSQL implementation of VerificationRepository.

    The challenge lives in the whatsapp_otp_* columns of the provider table.
    """

    def __init__(self, session: AsyncSession, provider: CrmProvider) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            provider: CRM provider whose table this repository writes
        """
        self.session = session
        self.provider = provider
        self.table = PROVIDER_TABLES[provider]

    def _active(self, account_id: AccountId):
        return (
            self.table.c.account_id == account_id,
            self.table.c.deleted_at.is_(None),
        )

    async def store_challenge(
        self, account_id: AccountId, phone: str, code: str, expires_at: datetime
    ) -> None:
        """Store a challenge, overwriting any outstanding one."""
        stmt = (
            update(self.table)
            .where(*self._active(account_id))
            .values(
                whatsapp_otp_code=code,
                whatsapp_otp_phone=phone,
                whatsapp_otp_expires_at=expires_at,
                whatsapp_status=WhatsAppStatus.PENDING.value,
                updated_at=datetime.now(timezone.utc),
            )
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to store challenge: {e}") from e

        if result.rowcount == 0:
            raise NotFoundError(f"{self.provider.value} link", str(account_id))

    async def get_challenge(self, account_id: AccountId) -> Optional[OtpChallenge]:
        """Get the outstanding challenge, if any."""
        stmt = select(
            self.table.c.account_id,
            self.table.c.whatsapp_otp_code,
            self.table.c.whatsapp_otp_phone,
            self.table.c.whatsapp_otp_expires_at,
        ).where(*self._active(account_id))
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read challenge: {e}") from e

        row = result.mappings().first()
        return row_to_otp_challenge(dict(row)) if row else None

    async def mark_verified(
        self, account_id: AccountId, phone: str, code: str | None = None
    ) -> None:
        """Consume the challenge and activate the number in one UPDATE."""
        conditions = [
            *self._active(account_id),
            self.table.c.whatsapp_otp_code.is_not(None),
        ]
        if code is not None:
            conditions.append(self.table.c.whatsapp_otp_code == code)

        stmt = (
            update(self.table)
            .where(*conditions)
            .values(
                whatsapp_number=phone,
                whatsapp_status=WhatsAppStatus.ACTIVE.value,
                whatsapp_otp_code=None,
                whatsapp_otp_phone=None,
                whatsapp_otp_expires_at=None,
                updated_at=datetime.now(timezone.utc),
            )
        )
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to mark phone verified: {e}") from e

        if result.rowcount == 0:
            raise NoPendingChallengeError()

    async def discard_challenge(self, account_id: AccountId, code: str) -> None:
        """Clear the challenge holding ``code`` and restore the prior status."""
        stmt = (
            update(self.table)
            .where(
                *self._active(account_id),
                self.table.c.whatsapp_otp_code == code,
            )
            .values(
                whatsapp_otp_code=None,
                whatsapp_otp_phone=None,
                whatsapp_otp_expires_at=None,
                whatsapp_status=case(
                    (
                        self.table.c.whatsapp_number.is_not(None),
                        WhatsAppStatus.ACTIVE.value,
                    ),
                    else_=WhatsAppStatus.NOT_SET.value,
                ),
                updated_at=datetime.now(timezone.utc),
            )
        )
        try:
            await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to discard challenge: {e}") from e

    async def get_status(self, account_id: AccountId) -> WhatsAppVerification:
        """Get WhatsApp status and verified number."""
        stmt = select(
            self.table.c.whatsapp_status, self.table.c.whatsapp_number
        ).where(*self._active(account_id))
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read WhatsApp status: {e}") from e

        row = result.mappings().first()
        if not row:
            raise NotFoundError(f"{self.provider.value} link", str(account_id))
        return WhatsAppVerification(
            status=WhatsAppStatus(row["whatsapp_status"]),
            number=row["whatsapp_number"],
        )
