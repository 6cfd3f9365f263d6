"""Application layer DI providers."""

from dishka import Scope, provide

from voicelink.application.usecase.auth import (
    GetCurrentAccountUseCase,
    InitiateLoginUseCase,
    LoginUseCase,
    RedeemSessionUseCase,
)
from voicelink.application.usecase.invitation import (
    AcceptInvitationUseCase,
    CreateInvitationUseCase,
    RemoveTeamMemberUseCase,
)
from voicelink.application.usecase.whatsapp import (
    GetWhatsAppStatusUseCase,
    SendOtpUseCase,
    VerifyOtpUseCase,
)
from voicelink.domain.repository import UnitOfWork
from voicelink.domain.service import (
    AuthService,
    IdentityService,
    InvitationService,
    JWTService,
    SessionService,
    VerificationService,
    WhatsAppService,
)
from voicelink.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_initiate_login_use_case(
        self, auth_service: AuthService
    ) -> InitiateLoginUseCase:
        """Provide initiate login use case."""
        return InitiateLoginUseCase(auth_service=auth_service)

    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self,
        auth_service: AuthService,
        identity_service: IdentityService,
        unit_of_work: UnitOfWork,
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(
            auth_service=auth_service,
            identity_service=identity_service,
            unit_of_work=unit_of_work,
        )

    @provide(scope=Scope.REQUEST)
    def get_redeem_session_use_case(
        self,
        session_service: SessionService,
        jwt_service: JWTService,
        unit_of_work: UnitOfWork,
    ) -> RedeemSessionUseCase:
        """Provide redeem session use case."""
        return RedeemSessionUseCase(
            session_service=session_service,
            jwt_service=jwt_service,
            unit_of_work=unit_of_work,
        )

    @provide(scope=Scope.REQUEST)
    def get_current_account_use_case(
        self,
        jwt_service: JWTService,
        identity_service: IdentityService,
    ) -> GetCurrentAccountUseCase:
        """Provide get current account use case."""
        return GetCurrentAccountUseCase(
            jwt_service=jwt_service,
            identity_service=identity_service,
        )

    # WhatsApp use cases
    @provide(scope=Scope.REQUEST)
    def get_send_otp_use_case(
        self,
        identity_service: IdentityService,
        verification_service: VerificationService,
        whatsapp_service: WhatsAppService,
        unit_of_work: UnitOfWork,
    ) -> SendOtpUseCase:
        """Provide send OTP use case."""
        return SendOtpUseCase(
            identity_service=identity_service,
            verification_service=verification_service,
            whatsapp_service=whatsapp_service,
            unit_of_work=unit_of_work,
        )

    @provide(scope=Scope.REQUEST)
    def get_verify_otp_use_case(
        self,
        verification_service: VerificationService,
        whatsapp_service: WhatsAppService,
        unit_of_work: UnitOfWork,
    ) -> VerifyOtpUseCase:
        """Provide verify OTP use case."""
        return VerifyOtpUseCase(
            verification_service=verification_service,
            whatsapp_service=whatsapp_service,
            unit_of_work=unit_of_work,
        )

    @provide(scope=Scope.REQUEST)
    def get_whatsapp_status_use_case(
        self, verification_service: VerificationService
    ) -> GetWhatsAppStatusUseCase:
        """Provide get WhatsApp status use case."""
        return GetWhatsAppStatusUseCase(verification_service=verification_service)

    # Invitation use cases
    @provide(scope=Scope.REQUEST)
    def get_create_invitation_use_case(
        self,
        identity_service: IdentityService,
        invitation_service: InvitationService,
        unit_of_work: UnitOfWork,
    ) -> CreateInvitationUseCase:
        """Provide create invitation use case."""
        return CreateInvitationUseCase(
            identity_service=identity_service,
            invitation_service=invitation_service,
            unit_of_work=unit_of_work,
        )

    @provide(scope=Scope.REQUEST)
    def get_accept_invitation_use_case(
        self,
        invitation_service: InvitationService,
        whatsapp_service: WhatsAppService,
        unit_of_work: UnitOfWork,
    ) -> AcceptInvitationUseCase:
        """Provide accept invitation use case."""
        return AcceptInvitationUseCase(
            invitation_service=invitation_service,
            whatsapp_service=whatsapp_service,
            unit_of_work=unit_of_work,
        )

    @provide(scope=Scope.REQUEST)
    def get_remove_team_member_use_case(
        self, identity_service: IdentityService, unit_of_work: UnitOfWork
    ) -> RemoveTeamMemberUseCase:
        """Provide remove team member use case."""
        return RemoveTeamMemberUseCase(
            identity_service=identity_service, unit_of_work=unit_of_work
        )
