"""Odoo OAuth 2.0 client implementation."""

from urllib.parse import urlencode

import logfire

from voicelink.adapter.crm.base import HttpCrmOAuthClient
from voicelink.adapter.error import UpstreamAuthError, UpstreamProfileError
from voicelink.domain.service.auth_service import CrmOAuthClient
from voicelink.domain.value import CrmProfile, CrmProvider


class OdooOAuthClient(CrmOAuthClient):
    """Base class for Odoo OAuth clients.

    Provides type distinction for dependency injection.
    """

    provider = CrmProvider.ODOO


class RealOdooOAuthClient(HttpCrmOAuthClient, OdooOAuthClient):
    """Odoo OAuth 2.0 implicit flow.

    Odoo hands the access token straight to the callback, so there is no
    code exchange: the token is validated against the tokeninfo endpoint,
    which also carries the user's identity.
    """

    provider = CrmProvider.ODOO

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        auth_base_url: str = "https://accounts.odoo.com",
        **kwargs,
    ) -> None:
        """Initialize Odoo OAuth client.

        Args:
            client_id: Odoo OAuth client ID
            client_secret: Odoo OAuth client secret
            auth_base_url: Base URL of the Odoo accounts server
            **kwargs: Timeout and transport, see HttpCrmOAuthClient
        """
        super().__init__(client_id, client_secret, **kwargs)
        self.authorize_url = f"{auth_base_url}/oauth2/auth"
        self.tokeninfo_url = f"{auth_base_url}/oauth2/tokeninfo"

    async def initiate_authorization(self, state: str, redirect_uri: str) -> str:
        """Build the Odoo authorization URL."""
        params = {
            "response_type": "token",
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "scope": "userinfo",
            "state": state,
        }
        logfire.info("Odoo OAuth authorization initiated", redirect_uri=redirect_uri)
        return f"{self.authorize_url}?{urlencode(params)}"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Validate the access token delivered to the callback.

        Raises:
            UpstreamAuthError: If the token is rejected or was issued to
                another client
        """
        result = await self._request(
            "GET",
            self.tokeninfo_url,
            UpstreamAuthError,
            "token validation",
            params={"access_token": code},
        )
        audience = result.get("audience") or result.get("client_id")
        if audience and audience != self.client_id:
            logfire.error("Odoo token issued to another client", audience=audience)
            raise UpstreamAuthError(
                "Access token was issued to another client",
                provider=self.provider.value,
            )
        return code

    async def fetch_profile(self, access_token: str) -> CrmProfile:
        """Read the Odoo user from the token info.

        Raises:
            UpstreamProfileError: If the request fails or the payload is malformed
        """
        result = await self._request(
            "GET",
            self.tokeninfo_url,
            UpstreamProfileError,
            "user info request",
            params={"access_token": access_token},
        )
        user_id = result.get("user_id")
        if not user_id:
            raise UpstreamProfileError(
                "Token info has no user_id", provider=self.provider.value
            )

        logfire.info("Odoo profile fetched", external_id=str(user_id))
        return CrmProfile(
            provider=self.provider,
            external_id=str(user_id),
            email=result.get("email"),
            name=result.get("name"),
            raw=result,
        )


class MockOdooOAuthClient(OdooOAuthClient):
    """Mock Odoo OAuth client for testing.

    Returns deterministic test data without making real API calls.
    """

    async def initiate_authorization(self, state: str, redirect_uri: str) -> str:
        """Return mock authorization URL."""
        return f"https://accounts.odoo.com/oauth2/auth?state={state}&mock=true"

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Accept any token except "invalid"."""
        if code == "invalid":
            raise UpstreamAuthError("Token validation failed: 401", provider="odoo")
        return code

    async def fetch_profile(self, access_token: str) -> CrmProfile:
        """Return mock user information without an email."""
        return CrmProfile(
            provider=CrmProvider.ODOO,
            external_id=f"odoo-{access_token}",
            email=None,
            name="Mock Odoo User",
            raw={"user_id": f"odoo-{access_token}"},
        )
