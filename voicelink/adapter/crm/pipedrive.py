"""Pipedrive OAuth 2.0 client implementation."""

from urllib.parse import urlencode

import httpx
import logfire

from voicelink.adapter.crm.base import HttpCrmOAuthClient
from voicelink.adapter.error import UpstreamAuthError, UpstreamProfileError
from voicelink.domain.service.auth_service import CrmOAuthClient
from voicelink.domain.value import CrmProfile, CrmProvider


class PipedriveOAuthClient(CrmOAuthClient):
    """Base class for Pipedrive OAuth clients.

    Provides type distinction for dependency injection.
    """

    provider = CrmProvider.PIPEDRIVE


# Tokens whose profile fetch never ran are evicted oldest first
MAX_PENDING_API_DOMAINS = 256


class RealPipedriveOAuthClient(HttpCrmOAuthClient, PipedriveOAuthClient):
    """Pipedrive OAuth 2.0 authorization code flow.

    Pipedrive returns a company-specific ``api_domain`` with every token; the
    profile is fetched from that domain when present.
    """

    provider = CrmProvider.PIPEDRIVE

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        auth_base_url: str = "https://oauth.pipedrive.com",
        api_base_url: str = "https://api.pipedrive.com",
        **kwargs,
    ) -> None:
        """Initialize Pipedrive OAuth client.

        Args:
            client_id: Pipedrive OAuth client ID
            client_secret: Pipedrive OAuth client secret
            auth_base_url: Base URL of the authorization server
            api_base_url: Fallback API base URL when no api_domain is known
            **kwargs: Timeout and transport, see HttpCrmOAuthClient
        """
        super().__init__(client_id, client_secret, **kwargs)
        self.authorize_url = f"{auth_base_url}/oauth/authorize"
        self.token_url = f"{auth_base_url}/oauth/token"
        self.api_base_url = api_base_url
        # access token -> api_domain from the token response
        self._api_domains: dict[str, str] = {}

    async def initiate_authorization(self, state: str, redirect_uri: str) -> str:
        """Build the Pipedrive authorization URL."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "state": state,
        }
        logfire.info("Pipedrive OAuth authorization initiated", redirect_uri=redirect_uri)
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Exchange the authorization code for an access token.

        Client credentials are sent with HTTP basic auth.

        Raises:
            UpstreamAuthError: If Pipedrive rejects the code
        """
        result = await self._request(
            "POST",
            self.token_url,
            UpstreamAuthError,
            "token exchange",
            auth=httpx.BasicAuth(self.client_id, self.client_secret),
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
            },
        )
        token = result.get("access_token")
        if not token:
            raise UpstreamAuthError(
                "Token response has no access_token", provider=self.provider.value
            )
        if result.get("api_domain"):
            self._remember_api_domain(token, result["api_domain"].rstrip("/"))
        return token

    def _remember_api_domain(self, token: str, api_domain: str) -> None:
        self._api_domains[token] = api_domain
        while len(self._api_domains) > MAX_PENDING_API_DOMAINS:
            stale = next(iter(self._api_domains))
            del self._api_domains[stale]
            logfire.warn("Pipedrive api_domain evicted before profile fetch")

    async def fetch_profile(self, access_token: str) -> CrmProfile:
        """Fetch the current Pipedrive user.

        Raises:
            UpstreamProfileError: If the request fails or the payload is malformed
        """
        api_domain = self._api_domains.pop(access_token, self.api_base_url)
        result = await self._request(
            "GET",
            f"{api_domain}/api/v1/users/me",
            UpstreamProfileError,
            "user info request",
            headers={"Authorization": f"Bearer {access_token}"},
        )
        data = result.get("data") or {}
        if not data.get("id"):
            raise UpstreamProfileError(
                "User info has no id", provider=self.provider.value
            )

        logfire.info("Pipedrive profile fetched", external_id=str(data["id"]))
        return CrmProfile(
            provider=self.provider,
            external_id=str(data["id"]),
            email=data.get("email"),
            name=data.get("name"),
            raw={**result, "api_domain": api_domain},
        )


class MockPipedriveOAuthClient(PipedriveOAuthClient):
    """Mock Pipedrive OAuth client for testing.

    Returns deterministic test data without making real API calls.
    """

    async def initiate_authorization(self, state: str, redirect_uri: str) -> str:
        """Return mock authorization URL."""
        return f"https://oauth.pipedrive.com/oauth/authorize?state={state}&mock=true"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Return a mock token; the code "invalid" is rejected."""
        if code == "invalid":
            raise UpstreamAuthError("Token exchange failed: 401", provider="pipedrive")
        return f"mock-token-{code}"

    async def fetch_profile(self, access_token: str) -> CrmProfile:
        """Return mock user information."""
        user_id = access_token.removeprefix("mock-token-")
        return CrmProfile(
            provider=CrmProvider.PIPEDRIVE,
            external_id=f"pd-{user_id}",
            email=f"{user_id}@pipedrive.example",
            name="Mock Pipedrive User",
            raw={"data": {"id": f"pd-{user_id}"}},
        )
