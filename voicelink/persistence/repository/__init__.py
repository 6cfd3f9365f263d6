"""PostgreSQL repository implementations."""

from voicelink.persistence.repository.account import PostgresAccountRepository
from voicelink.persistence.repository.invitation import PostgresInvitationRepository
from voicelink.persistence.repository.provider_link import (
    PostgresProviderLinkRepository,
)
from voicelink.persistence.repository.session_redemption import (
    PostgresSessionRedemptionRepository,
)
from voicelink.persistence.repository.unit_of_work import PostgresUnitOfWork
from voicelink.persistence.repository.verification import (
    PostgresVerificationRepository,
)

__all__ = [
    "PostgresAccountRepository",
    "PostgresInvitationRepository",
    "PostgresProviderLinkRepository",
    "PostgresSessionRedemptionRepository",
    "PostgresUnitOfWork",
    "PostgresVerificationRepository",
]
