"""Infrastructure layer errors."""


class AdapterError(Exception):
    """Base infrastructure error."""

    kind: str = "AdapterError"


class ProviderError(AdapterError):
    """External provider error.

    Attributes:
        provider: Name of the upstream service
        status_code: Upstream HTTP status, None for network failures and timeouts
    """

    def __init__(self, message: str, provider: str, status_code: int | None = None):
        self.provider = provider
        self.status_code = status_code
        super().__init__(message)


class UpstreamAuthError(ProviderError):
    """CRM rejected the authorization code or token exchange."""

    kind = "UpstreamAuthError"


class UpstreamProfileError(ProviderError):
    """CRM profile fetch failed after a valid token was obtained."""

    kind = "UpstreamProfileError"


class DeliveryError(ProviderError):
    """WhatsApp message could not be delivered."""

    kind = "DeliveryError"
