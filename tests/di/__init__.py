"""Mock providers for testing."""

from .crm import MockCrmClientProvider
from .persistence import MockPersistenceProvider
from .whatsapp import MockWhatsAppProvider
from .container import build_test_container

__all__ = [
    "MockCrmClientProvider",
    "MockPersistenceProvider",
    "MockWhatsAppProvider",
    "build_test_container",
]
