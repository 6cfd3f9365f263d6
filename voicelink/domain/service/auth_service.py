"""Authentication domain service."""

from voicelink.config import CrmSettings
from voicelink.domain.value import CrmProfile, CrmProvider
from voicelink.util.error import ConfigurationError

from .base import Service


class CrmOAuthClient:
    """OAuth client interface shared by all CRM providers."""

    provider: CrmProvider

    async def initiate_authorization(self, state: str, redirect_uri: str) -> str:
        """Build the provider's authorization URL.

        Args:
            state: State parameter for CSRF protection
            redirect_uri: Callback URL registered with the provider

        Returns:
            Authorization URL to redirect user to
        """
        raise NotImplementedError

    async def exchange_code(self, code: str, redirect_uri: str) -> str:
        """Exchange an authorization code for an access token.

        Args:
            code: Authorization code from the callback
            redirect_uri: Callback URL used to obtain the code

        Returns:
            Access token

        Raises:
            UpstreamAuthError: If the provider rejects the exchange or times out
        """
        raise NotImplementedError

    async def fetch_profile(self, access_token: str) -> CrmProfile:
        """Fetch the authenticated user's profile.

        Args:
            access_token: Token returned by exchange_code

        Returns:
            Profile of the CRM user

        Raises:
            UpstreamProfileError: If the profile request fails or times out
        """
        raise NotImplementedError


class AuthService(Service):
    """Domain service for multi-provider CRM authentication.

    Coordinates the OAuth flows of Teamleader, Pipedrive and Odoo.
    """

    def __init__(
        self,
        crm_clients: dict[CrmProvider, CrmOAuthClient],
        crm_settings: CrmSettings,
    ) -> None:
        """Initialize auth service.

        Args:
            crm_clients: Map of provider to OAuth client implementation
            crm_settings: CRM settings holding the callback URLs
        """
        self.crm_clients = crm_clients
        self.crm_settings = crm_settings

    def _client(self, provider: CrmProvider) -> CrmOAuthClient:
        client = self.crm_clients.get(provider)
        if not client:
            raise ConfigurationError(f"No OAuth client configured for {provider.value}")
        return client

    def callback_url(self, provider: CrmProvider) -> str:
        """Callback URL registered with the provider."""
        return getattr(self.crm_settings, f"{provider.value}_callback_url")

    async def initiate_login(self, provider: CrmProvider, state: str) -> str:
        """Initiate OAuth login flow for any provider.

        Args:
            provider: CRM provider to use
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        return await self._client(provider).initiate_authorization(
            state, self.callback_url(provider)
        )

    async def complete_login(
        self, provider: CrmProvider, code: str, redirect_uri: str | None = None
    ) -> CrmProfile:
        """Exchange the callback code and fetch the CRM profile.

        Args:
            provider: CRM provider used
            code: Authorization code (access token for Odoo's implicit flow)
            redirect_uri: Redirect URI used to obtain the code, defaults to
                the provider's callback URL

        Returns:
            Profile of the authenticated CRM user

        Raises:
            UpstreamAuthError: If the code exchange fails
            UpstreamProfileError: If the profile fetch fails
        """
        client = self._client(provider)
        access_token = await client.exchange_code(
            code, redirect_uri or self.callback_url(provider)
        )
        return await client.fetch_profile(access_token)
