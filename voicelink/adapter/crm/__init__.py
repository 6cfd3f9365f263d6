"""CRM OAuth clients."""

from .odoo import MockOdooOAuthClient, OdooOAuthClient, RealOdooOAuthClient
from .pipedrive import (
    MockPipedriveOAuthClient,
    PipedriveOAuthClient,
    RealPipedriveOAuthClient,
)
from .teamleader import (
    MockTeamleaderOAuthClient,
    RealTeamleaderOAuthClient,
    TeamleaderOAuthClient,
)

__all__ = [
    "MockOdooOAuthClient",
    "MockPipedriveOAuthClient",
    "MockTeamleaderOAuthClient",
    "OdooOAuthClient",
    "PipedriveOAuthClient",
    "RealOdooOAuthClient",
    "RealPipedriveOAuthClient",
    "RealTeamleaderOAuthClient",
    "TeamleaderOAuthClient",
]
