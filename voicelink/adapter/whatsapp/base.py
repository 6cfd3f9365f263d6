"""Shared HTTP plumbing for WhatsApp senders."""

import httpx
import logfire

from voicelink.adapter.error import DeliveryError
from voicelink.domain.service.whatsapp_service import WhatsAppSender
from voicelink.util.logging import mask_phone


class HttpWhatsAppSender(WhatsAppSender):
    """Base for senders that post messages to an HTTP API."""

    def __init__(
        self,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize sender.

        Args:
            timeout: Upper bound for each HTTP request, in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.timeout = timeout
        self.transport = transport

    def _error_message(self, response: httpx.Response) -> str:
        """Extract the upstream error message from a failed response."""
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if not isinstance(body, dict):
            return f"HTTP {response.status_code}"
        return body.get("message") or f"HTTP {response.status_code}"

    async def _post(self, url: str, phone: str, **kwargs) -> dict:
        """Post a message and return the decoded response.

        Args:
            url: Messages endpoint
            phone: Recipient, only used for logging
            **kwargs: Passed through to httpx

        Returns:
            Decoded JSON response

        Raises:
            DeliveryError: On rejection, timeout or network failure
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(url, **kwargs)
        except httpx.TimeoutException as e:
            logfire.error(f"{self.name} send timed out", phone=mask_phone(phone))
            raise DeliveryError("WhatsApp API timed out", provider=self.name) from e
        except httpx.HTTPError as e:
            logfire.error(
                f"{self.name} send HTTP error", phone=mask_phone(phone), error=str(e)
            )
            raise DeliveryError(
                f"HTTP error sending WhatsApp message: {e}", provider=self.name
            ) from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logfire.error(
                f"{self.name} rejected message",
                phone=mask_phone(phone),
                status_code=response.status_code,
                error=message,
            )
            raise DeliveryError(
                message, provider=self.name, status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
