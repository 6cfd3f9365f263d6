"""CRM infrastructure providers."""

from dishka import Scope, provide
import logfire

from voicelink.adapter.crm import (
    RealOdooOAuthClient,
    RealPipedriveOAuthClient,
    RealTeamleaderOAuthClient,
)
from voicelink.config import Settings
from voicelink.domain.service.auth_service import CrmOAuthClient
from voicelink.domain.value import CrmProvider
from voicelink.util.di.base import ProviderBase


class CrmClientProvider(ProviderBase):
    """CRM component base."""

    __mock_component__ = "crm"


class ProdCrmClientProvider(CrmClientProvider):
    """Production CRM provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_crm_clients(self, settings: Settings) -> dict[CrmProvider, CrmOAuthClient]:
        """Provide OAuth clients for every configured CRM.

        A CRM without client credentials is left out; logging in through it
        fails with a ConfigurationError.

        Returns:
            Dictionary mapping CrmProvider to its OAuth client
        """
        crm = settings.crm
        timeout = settings.http.timeout_seconds
        clients: dict[CrmProvider, CrmOAuthClient] = {}

        if crm.teamleader.client_id and crm.teamleader.client_secret:
            clients[CrmProvider.TEAMLEADER] = RealTeamleaderOAuthClient(
                client_id=crm.teamleader.client_id,
                client_secret=crm.teamleader.client_secret,
                auth_base_url=crm.teamleader.auth_base_url,
                api_base_url=crm.teamleader.api_base_url,
                timeout=timeout,
            )

        if crm.pipedrive.client_id and crm.pipedrive.client_secret:
            clients[CrmProvider.PIPEDRIVE] = RealPipedriveOAuthClient(
                client_id=crm.pipedrive.client_id,
                client_secret=crm.pipedrive.client_secret,
                auth_base_url=crm.pipedrive.auth_base_url,
                api_base_url=crm.pipedrive.api_base_url,
                timeout=timeout,
            )

        if crm.odoo.client_id:
            clients[CrmProvider.ODOO] = RealOdooOAuthClient(
                client_id=crm.odoo.client_id,
                client_secret=crm.odoo.client_secret,
                auth_base_url=crm.odoo.auth_base_url,
                timeout=timeout,
            )

        missing = [p.value for p in CrmProvider if p not in clients]
        if missing:
            logfire.warn("CRM providers not configured", providers=missing)
        return clients
