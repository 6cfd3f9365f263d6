"""Mock CRM providers for testing."""

from dishka import Scope, provide

from voicelink.adapter.crm import (
    MockOdooOAuthClient,
    MockPipedriveOAuthClient,
    MockTeamleaderOAuthClient,
)
from voicelink.domain.service.auth_service import CrmOAuthClient
from voicelink.domain.value import CrmProvider
from voicelink.util.di.infrastructure.crm import CrmClientProvider


class MockCrmClientProvider(CrmClientProvider):
    """Mock CRM provider using mock OAuth clients."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_crm_clients(self) -> dict[CrmProvider, CrmOAuthClient]:
        """Provide mock OAuth clients for all CRMs."""
        return {
            CrmProvider.TEAMLEADER: MockTeamleaderOAuthClient(),
            CrmProvider.PIPEDRIVE: MockPipedriveOAuthClient(),
            CrmProvider.ODOO: MockOdooOAuthClient(),
        }
