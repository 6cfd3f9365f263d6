"""Initiate login use case."""

import secrets

from pydantic import BaseModel

from voicelink.domain.service import AuthService
from voicelink.domain.value import CrmProvider


class InitiateLoginRequest(BaseModel):
    """Initiate login request."""

    provider: CrmProvider
    state: str | None = None  # Generated when the client does not supply one


class InitiateLoginResponse(BaseModel):
    """Initiate login response."""

    authorization_url: str
    state: str


class InitiateLoginUseCase:
    """Use case for starting the OAuth flow of a CRM provider."""

    def __init__(self, auth_service: AuthService) -> None:
        """Initialize initiate login use case.

        Args:
            auth_service: Authentication domain service
        """
        self.auth_service = auth_service

    async def execute(self, request: InitiateLoginRequest) -> InitiateLoginResponse:
        """Build the provider's authorization URL.

        Args:
            request: Provider and optional CSRF state

        Returns:
            Authorization URL and the state it carries
        """
        state = request.state or secrets.token_urlsafe(32)
        url = await self.auth_service.initiate_login(request.provider, state)
        return InitiateLoginResponse(authorization_url=url, state=state)
