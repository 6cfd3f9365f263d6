"""Domain services."""

from .auth_service import AuthService, CrmOAuthClient
from .base import Service
from .identity_service import IdentityService
from .invitation_service import InvitationService
from .jwt_service import JWTService
from .session_service import SessionService
from .verification_service import VerificationService
from .whatsapp_service import WhatsAppSender, WhatsAppService

__all__ = [
    "AuthService",
    "CrmOAuthClient",
    "IdentityService",
    "InvitationService",
    "JWTService",
    "Service",
    "SessionService",
    "VerificationService",
    "WhatsAppSender",
    "WhatsAppService",
]
