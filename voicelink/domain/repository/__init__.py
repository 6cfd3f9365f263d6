"""Repository interfaces for the VoiceLink domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from voicelink.domain.repository.account import AccountRepository
from voicelink.domain.repository.invitation import InvitationRepository
from voicelink.domain.repository.provider_link import ProviderLinkRepository
from voicelink.domain.repository.session import SessionRedemptionRepository
from voicelink.domain.repository.unit_of_work import UnitOfWork
from voicelink.domain.repository.verification import VerificationRepository

__all__ = [
    "AccountRepository",
    "InvitationRepository",
    "ProviderLinkRepository",
    "SessionRedemptionRepository",
    "UnitOfWork",
    "VerificationRepository",
]
