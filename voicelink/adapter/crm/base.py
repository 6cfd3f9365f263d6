"""Shared HTTP plumbing for CRM OAuth clients."""

import httpx
import logfire

from voicelink.adapter.error import ProviderError
from voicelink.domain.service.auth_service import CrmOAuthClient


class HttpCrmOAuthClient(CrmOAuthClient):
    """Base for CRM clients that talk to the provider over HTTP.

    Every request is bounded by ``timeout``. Non-2xx responses, timeouts and
    network errors are raised as the error class the caller passes in, so
    token exchange and profile fetch failures stay distinguishable.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize CRM client.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            timeout: Upper bound for each HTTP request, in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.timeout = timeout
        self.transport = transport

    async def _request(
        self,
        method: str,
        url: str,
        error_cls: type[ProviderError],
        action: str,
        **kwargs,
    ) -> dict:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            url: Request URL
            error_cls: Error raised on failure
            action: Short description used in logs and error messages
            **kwargs: Passed through to httpx

        Returns:
            Decoded JSON response

        Raises:
            ProviderError: ``error_cls`` on any failure
        """
        provider = self.provider.value
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logfire.error(f"{provider} {action} timed out", error=str(e))
            raise error_cls(f"{action} timed out", provider=provider) from e
        except httpx.HTTPError as e:
            logfire.error(f"{provider} {action} HTTP error", error=str(e))
            raise error_cls(f"HTTP error during {action}: {e}", provider=provider) from e

        if response.status_code >= 400:
            logfire.error(
                f"{provider} {action} failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise error_cls(
                f"{action} failed: {response.status_code}",
                provider=provider,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise error_cls(f"{action} returned invalid JSON", provider=provider) from e
