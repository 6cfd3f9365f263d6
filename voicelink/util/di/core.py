"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from voicelink.config import (
    AuthSettings,
    CrmSettings,
    InvitationSettings,
    OtpSettings,
    Settings,
)
from voicelink.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_crm_settings(self, settings: Settings) -> CrmSettings:
        """Provide CRM settings."""
        return settings.crm

    @provide(scope=Scope.APP)
    def provide_otp_settings(self, settings: Settings) -> OtpSettings:
        """Provide OTP settings."""
        return settings.otp

    @provide(scope=Scope.APP)
    def provide_invitation_settings(self, settings: Settings) -> InvitationSettings:
        """Provide invitation settings."""
        return settings.invitations
