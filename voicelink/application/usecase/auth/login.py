"""Login use case."""

from datetime import datetime

import logfire
from pydantic import BaseModel

from voicelink.domain.repository import UnitOfWork
from voicelink.domain.service import AuthService, IdentityService
from voicelink.domain.value import CrmProvider


class LoginRequest(BaseModel):
    """Login request from OAuth callback.

    These parameters come from the OAuth provider in the callback URL.
    """

    provider: CrmProvider  # Which provider is handling this login
    code: str  # Authorization code (access token for Odoo)
    redirect_uri: str | None = None  # Defaults to the provider's callback URL


class LoginResponse(BaseModel):
    """Login response."""

    success: bool = True
    session_url: str
    account_id: str
    expires_at: datetime


class LoginUseCase:
    """Use case for multi-provider login via CRM OAuth."""

    def __init__(
        self,
        auth_service: AuthService,
        identity_service: IdentityService,
        unit_of_work: UnitOfWork,
    ) -> None:
        """Initialize login use case.

        Args:
            auth_service: Authentication domain service (handles all providers)
            identity_service: Identity resolution domain service
            unit_of_work: Commits the resolved account before the link is returned
        """
        self.auth_service = auth_service
        self.identity_service = identity_service
        self.unit_of_work = unit_of_work

    async def execute(self, request: LoginRequest) -> LoginResponse:
        """Execute multi-provider login flow.

        Steps:
        1. Exchange the code and fetch the CRM profile
        2. Resolve the profile to an account, creating it on first login
        3. Issue a single-use magic link for the account

        Args:
            request: Login request with OAuth callback parameters

        Returns:
            Magic link and account ID

        Raises:
            UpstreamAuthError: If the code exchange fails
            UpstreamProfileError: If the profile fetch fails
            AccountCreationError: If a new account cannot be created
            SessionIssuanceError: If the magic link cannot be issued
        """
        with logfire.span("login", provider=request.provider.value):
            profile = await self.auth_service.complete_login(
                request.provider, request.code, request.redirect_uri
            )
            logfire.info(
                "OAuth completed",
                provider=request.provider.value,
                external_id=profile.external_id,
            )

            session = await self.identity_service.resolve(request.provider, profile)
            await self.unit_of_work.commit()

            return LoginResponse(
                session_url=session.session_url,
                account_id=str(session.account_id),
                expires_at=session.expires_at,
            )
