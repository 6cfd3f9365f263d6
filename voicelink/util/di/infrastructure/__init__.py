"""Infrastructure providers."""

# Import bases
from .crm import CrmClientProvider
from .persistence import PersistenceProvider
from .whatsapp import WhatsAppProvider

# Import implementations (needed for __subclasses__())
from .crm import ProdCrmClientProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401
from .whatsapp import ProdWhatsAppProvider  # noqa: F401

__all__ = [
    "CrmClientProvider",
    "PersistenceProvider",
    "ProdCrmClientProvider",
    "ProdPersistenceProvider",
    "ProdWhatsAppProvider",
    "WhatsAppProvider",
]
