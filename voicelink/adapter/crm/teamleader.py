"""Teamleader Focus OAuth 2.0 client implementation."""

from urllib.parse import urlencode

import logfire

from voicelink.adapter.crm.base import HttpCrmOAuthClient
from voicelink.adapter.error import UpstreamAuthError, UpstreamProfileError
from voicelink.domain.service.auth_service import CrmOAuthClient
from voicelink.domain.value import CrmProfile, CrmProvider


class TeamleaderOAuthClient(CrmOAuthClient):
    """Base class for Teamleader OAuth clients.

    Provides type distinction for dependency injection.
    """

    provider = CrmProvider.TEAMLEADER


class RealTeamleaderOAuthClient(HttpCrmOAuthClient, TeamleaderOAuthClient):
    """Teamleader Focus OAuth 2.0 authorization code flow."""

    provider = CrmProvider.TEAMLEADER

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        auth_base_url: str = "https://app.teamleader.eu",
        api_base_url: str = "https://api.focus.teamleader.eu",
        **kwargs,
    ) -> None:
        """Initialize Teamleader OAuth client.

        Args:
            client_id: Teamleader OAuth client ID
            client_secret: Teamleader OAuth client secret
            auth_base_url: Base URL of the authorization server
            api_base_url: Base URL of the Focus API
            **kwargs: Timeout and transport, see HttpCrmOAuthClient
        """
        super().__init__(client_id, client_secret, **kwargs)
        self.authorize_url = f"{auth_base_url}/oauth2/authorize"
        self.token_url = f"{auth_base_url}/oauth2/access_token"
        self.user_info_url = f"{api_base_url}/users.me"

    async def initiate_authorization(self, state: str, redirect_uri: str) -> str:
        """Build the Teamleader authorization URL."""
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": redirect_uri,
            "state": state,
        }
        logfire.info("Teamleader OAuth authorization initiated", redirect_uri=redirect_uri)
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Exchange the authorization code for an access token.

        Raises:
            UpstreamAuthError: If Teamleader rejects the code
        """
        result = await self._request(
            "POST",
            self.token_url,
            UpstreamAuthError,
            "token exchange",
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "grant_type": "authorization_code",
                "redirect_uri": redirect_uri,
            },
        )
        token = result.get("access_token")
        if not token:
            raise UpstreamAuthError(
                "Token response has no access_token", provider=self.provider.value
            )
        return token

    async def fetch_profile(self, access_token: str) -> CrmProfile:
        """Fetch the current Teamleader user.

        Raises:
            UpstreamProfileError: If the request fails or the payload is malformed
        """
        result = await self._request(
            "GET",
            self.user_info_url,
            UpstreamProfileError,
            "user info request",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        data = result.get("data") or {}
        if not data.get("id"):
            raise UpstreamProfileError(
                "User info has no id", provider=self.provider.value
            )

        name = " ".join(
            part for part in (data.get("first_name"), data.get("last_name")) if part
        )
        logfire.info("Teamleader profile fetched", external_id=str(data["id"]))
        return CrmProfile(
            provider=self.provider,
            external_id=str(data["id"]),
            email=data.get("email"),
            name=name or None,
            raw=result,
        )


class MockTeamleaderOAuthClient(TeamleaderOAuthClient):
    """Mock Teamleader OAuth client for testing.

    Returns deterministic test data without making real API calls. The
    external ID is derived from the code, so tests can log in as different users.
    """

    async def initiate_authorization(self, state: str, redirect_uri: str) -> str:
        """Return mock authorization URL."""
        return f"https://app.teamleader.eu/oauth2/authorize?state={state}&mock=true"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Return a mock token; the code "invalid" is rejected."""
        if code == "invalid":
            raise UpstreamAuthError("Token exchange failed: 400", provider="teamleader")
        return f"mock-token-{code}"

    async def fetch_profile(self, access_token: str) -> CrmProfile:
        """Return mock user information."""
        user_id = access_token.removeprefix("mock-token-")
        return CrmProfile(
            provider=CrmProvider.TEAMLEADER,
            external_id=f"tl-{user_id}",
            email=f"{user_id}@teamleader.example",
            name="Mock Teamleader User",
            raw={"data": {"id": f"tl-{user_id}"}},
        )
