"""Utility layer errors."""


class UtilError(Exception):
    """Base utility error."""

    kind: str = "UtilError"


class ConfigurationError(UtilError):
    """Required configuration is missing or invalid."""

    kind = "ConfigurationError"


class UnknownProviderError(ConfigurationError):
    """Configured WhatsApp sender variant is not supported."""

    kind = "UnknownProviderError"

    def __init__(self, provider: str, supported: list[str]):
        self.provider = provider
        self.supported = supported
        super().__init__(
            f"Unknown WhatsApp provider '{provider}'. "
            f"Supported providers: {', '.join(supported)}"
        )
