"""PostgreSQL implementation of ProviderLink repository."""

from datetime import datetime, timezone
from typing import Any, Optional

import logfire
from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voicelink.domain.error import (
    AccountCreationError,
    DuplicateProviderLinkError,
    NotFoundError,
    PersistenceError,
)
from voicelink.domain.model import Account, ProviderLink
from voicelink.domain.repository import ProviderLinkRepository
from voicelink.domain.value import AccountId, CrmProvider, ProviderLinkId
from voicelink.persistence.mappers import (
    account_to_dict,
    provider_link_to_dict,
    row_to_provider_link,
)
from voicelink.persistence.tables import PROVIDER_TABLES, accounts_table


class PostgresProviderLinkRepository(ProviderLinkRepository):
    """PostgreSQL implementation of ProviderLinkRepository.

    Backed by the ``{provider}_users`` table of the given provider.
    """

    def __init__(self, session: AsyncSession, provider: CrmProvider) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
            provider: CRM provider whose table this repository reads
        """
        self.session = session
        self.provider = provider
        self.table = PROVIDER_TABLES[provider]

    async def find_active_by_external_id(
        self, external_id: str
    ) -> Optional[ProviderLink]:
        """Get the non-deleted link for an external user."""
        stmt = select(self.table).where(
            self.table.c.external_id == external_id,
            self.table.c.deleted_at.is_(None),
        )
        try:
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load provider link: {e}") from e
        return row_to_provider_link(dict(row), self.provider) if row else None

    async def find_by_account_id(self, account_id: AccountId) -> Optional[ProviderLink]:
        """Get the non-deleted link bound to an account."""
        stmt = select(self.table).where(
            self.table.c.account_id == account_id,
            self.table.c.deleted_at.is_(None),
        )
        try:
            result = await self.session.execute(stmt)
            row = result.mappings().first()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load provider link: {e}") from e
        return row_to_provider_link(dict(row), self.provider) if row else None

    async def create_with_account(
        self, account: Account, link: ProviderLink
    ) -> ProviderLink:
        """Insert account and link inside a savepoint.

        A uniqueness violation rolls back only the savepoint, so the caller's
        transaction stays usable for re-reading the competing link.
        """
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    insert(accounts_table).values(**account_to_dict(account))
                )
                await self.session.execute(
                    insert(self.table).values(**provider_link_to_dict(link))
                )
        except IntegrityError as e:
            existing = await self.find_active_by_external_id(link.external_id)
            if existing:
                logfire.info(
                    "Provider link created concurrently",
                    provider=self.provider.value,
                    external_id=link.external_id,
                )
                raise DuplicateProviderLinkError(self.provider.value, link.external_id)
            logfire.error(
                "Account creation failed",
                provider=self.provider.value,
                external_id=link.external_id,
                error=str(e.orig),
            )
            raise AccountCreationError(
                f"Could not create account for {self.provider.value}:{link.external_id}"
            ) from e
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to create account: {e}") from e

        return link

    async def update_profile(
        self, link_id: ProviderLinkId, profile: dict[str, Any]
    ) -> ProviderLink:
        """Overwrite the profile snapshot of a link."""
        stmt = (
            update(self.table)
            .where(self.table.c.id == link_id)
            .values(profile=profile, updated_at=datetime.now(timezone.utc))
            .returning(self.table)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to update profile: {e}") from e

        row = result.mappings().first()
        if not row:
            raise NotFoundError("ProviderLink", str(link_id))
        return row_to_provider_link(dict(row), self.provider)

    async def soft_delete_member(
        self, account_id: AccountId, invited_by: AccountId
    ) -> bool:
        """Set ``deleted_at`` on the member's active link."""
        now = datetime.now(timezone.utc)
        stmt = (
            update(self.table)
            .where(
                self.table.c.account_id == account_id,
                self.table.c.invited_by == invited_by,
                self.table.c.deleted_at.is_(None),
            )
            .values(deleted_at=now, updated_at=now)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to remove team member: {e}") from e
        return result.rowcount > 0
