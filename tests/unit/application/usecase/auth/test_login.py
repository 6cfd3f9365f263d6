"""Unit tests for the login use cases."""

from urllib.parse import parse_qs, urlparse

import pytest

from voicelink.adapter.error import UpstreamAuthError
from voicelink.application.usecase.auth import (
    GetCurrentAccountUseCase,
    InitiateLoginUseCase,
    LoginUseCase,
    RedeemSessionUseCase,
)
from voicelink.application.usecase.auth.get_current_account import (
    GetCurrentAccountRequest,
)
from voicelink.application.usecase.auth.initiate_login import InitiateLoginRequest
from voicelink.application.usecase.auth.login import LoginRequest
from voicelink.application.usecase.auth.redeem_session import RedeemSessionRequest
from voicelink.domain.error import InvalidSessionError
from voicelink.domain.service import JWTService
from voicelink.domain.value import CrmProvider, WhatsAppStatus
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


def _magic_token(session_url: str) -> str:
    return parse_qs(urlparse(session_url).query)["token"][0]


class TestInitiateLoginUseCase:
    """Tests for InitiateLoginUseCase."""

    @pytest.mark.asyncio
    async def test_generates_state(self, unit_env):
        initiate_login = await unit_env.get(InitiateLoginUseCase)

        response = await initiate_login.execute(
            InitiateLoginRequest(provider=CrmProvider.TEAMLEADER)
        )

        assert response.state
        assert f"state={response.state}" in response.authorization_url

    @pytest.mark.asyncio
    async def test_keeps_caller_state(self, unit_env):
        initiate_login = await unit_env.get(InitiateLoginUseCase)

        response = await initiate_login.execute(
            InitiateLoginRequest(provider=CrmProvider.ODOO, state="abc")
        )

        assert response.state == "abc"


class TestLoginUseCase:
    """Tests for LoginUseCase."""

    @pytest.mark.asyncio
    async def test_login_returns_magic_link(self, unit_env):
        """A successful callback yields a magic link for the account."""
        # Arrange
        login = await unit_env.get(LoginUseCase)

        # Act
        response = await login.execute(
            LoginRequest(provider=CrmProvider.TEAMLEADER, code="ann")
        )

        # Assert
        assert response.success is True
        assert response.account_id
        assert "/auth/session?token=" in response.session_url

    @pytest.mark.asyncio
    async def test_repeat_login_same_account(self, unit_env):
        login = await unit_env.get(LoginUseCase)

        first = await login.execute(LoginRequest(provider=CrmProvider.PIPEDRIVE, code="sam"))
        second = await login.execute(LoginRequest(provider=CrmProvider.PIPEDRIVE, code="sam"))

        assert first.account_id == second.account_id

    @pytest.mark.asyncio
    async def test_rejected_code_propagates(self, unit_env):
        login = await unit_env.get(LoginUseCase)

        with pytest.raises(UpstreamAuthError):
            await login.execute(
                LoginRequest(provider=CrmProvider.TEAMLEADER, code="invalid")
            )


class TestRedeemSessionUseCase:
    """Tests for RedeemSessionUseCase."""

    @pytest.mark.asyncio
    async def test_redeem_issues_cookie_token_once(self, unit_env):
        """The magic link becomes a session token, and only once."""
        # Arrange
        login = await unit_env.get(LoginUseCase)
        redeem = await unit_env.get(RedeemSessionUseCase)
        jwt_service = await unit_env.get(JWTService)
        login_response = await login.execute(
            LoginRequest(provider=CrmProvider.TEAMLEADER, code="ann")
        )
        token = _magic_token(login_response.session_url)

        # Act
        session = await redeem.execute(RedeemSessionRequest(token=token))

        # Assert
        assert session.account_id == login_response.account_id
        assert jwt_service.verify_token(session.token).account_id == session.account_id
        with pytest.raises(InvalidSessionError):
            await redeem.execute(RedeemSessionRequest(token=token))


class TestGetCurrentAccountUseCase:
    """Tests for GetCurrentAccountUseCase."""

    @pytest.mark.asyncio
    async def test_returns_account_with_links(self, unit_env):
        # Arrange
        login = await unit_env.get(LoginUseCase)
        get_current_account = await unit_env.get(GetCurrentAccountUseCase)
        jwt_service = await unit_env.get(JWTService)
        login_response = await login.execute(
            LoginRequest(provider=CrmProvider.TEAMLEADER, code="ann")
        )
        token = jwt_service.create_token(
            login_response.account_id, "ann@teamleader.example"
        )

        # Act
        response = await get_current_account.execute(
            GetCurrentAccountRequest(token=token)
        )

        # Assert
        assert response.account_id == login_response.account_id
        assert response.email == "ann@teamleader.example"
        assert len(response.links) == 1
        assert response.links[0].provider == CrmProvider.TEAMLEADER
        assert response.links[0].external_id == "tl-ann"
        assert response.links[0].whatsapp_status == WhatsAppStatus.NOT_SET
