"""Domain layer DI providers."""

from dishka import Scope, provide

from voicelink.config import (
    AuthSettings,
    CrmSettings,
    InvitationSettings,
    OtpSettings,
    Settings,
)
from voicelink.domain.repository import (
    AccountRepository,
    InvitationRepository,
    ProviderLinkRepository,
    SessionRedemptionRepository,
    VerificationRepository,
)
from voicelink.domain.service import (
    AuthService,
    CrmOAuthClient,
    IdentityService,
    InvitationService,
    JWTService,
    SessionService,
    VerificationService,
    WhatsAppSender,
    WhatsAppService,
)
from voicelink.domain.value import CrmProvider
from voicelink.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_auth_service(
        self,
        crm_clients: dict[CrmProvider, CrmOAuthClient],
        crm_settings: CrmSettings,
    ) -> AuthService:
        """Provide multi-provider authentication domain service.

        Args:
            crm_clients: Dictionary mapping providers to their OAuth clients
            crm_settings: CRM settings with the callback URLs

        Returns:
            AuthService configured with all available OAuth clients
        """
        return AuthService(crm_clients=crm_clients, crm_settings=crm_settings)

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_session_service(
        self,
        jwt_service: JWTService,
        session_redemption_repository: SessionRedemptionRepository,
        settings: Settings,
    ) -> SessionService:
        """Provide magic link domain service."""
        return SessionService(
            jwt_service=jwt_service,
            session_redemption_repository=session_redemption_repository,
            auth_settings=settings.auth,
            base_url=settings.api.base_url,
        )

    @provide
    def get_identity_service(
        self,
        provider_link_repositories: dict[CrmProvider, ProviderLinkRepository],
        account_repository: AccountRepository,
        session_service: SessionService,
    ) -> IdentityService:
        """Provide identity resolution domain service."""
        return IdentityService(
            provider_link_repositories=provider_link_repositories,
            account_repository=account_repository,
            session_service=session_service,
        )

    @provide
    def get_verification_service(
        self,
        verification_repositories: dict[CrmProvider, VerificationRepository],
        otp_settings: OtpSettings,
    ) -> VerificationService:
        """Provide verification domain service."""
        return VerificationService(
            verification_repositories=verification_repositories,
            otp_settings=otp_settings,
        )

    @provide
    def get_whatsapp_service(self, sender: WhatsAppSender) -> WhatsAppService:
        """Provide WhatsApp messaging domain service."""
        return WhatsAppService(sender=sender)

    @provide
    def get_invitation_service(
        self,
        invitation_repositories: dict[CrmProvider, InvitationRepository],
        invitation_settings: InvitationSettings,
        otp_settings: OtpSettings,
    ) -> InvitationService:
        """Provide invitation domain service."""
        return InvitationService(
            invitation_repositories=invitation_repositories,
            invitation_settings=invitation_settings,
            otp_settings=otp_settings,
        )
