"""Tests for the Teamleader OAuth client."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from voicelink.adapter.crm import RealTeamleaderOAuthClient
from voicelink.adapter.error import UpstreamAuthError, UpstreamProfileError
from voicelink.domain.value import CrmProvider

REDIRECT_URI = "http://localhost:8000/auth/callback/teamleader"


def make_client(handler) -> RealTeamleaderOAuthClient:
    return RealTeamleaderOAuthClient(
        client_id="tl-client",
        client_secret="tl-secret",
        auth_base_url="https://app.teamleader.eu",
        api_base_url="https://api.focus.teamleader.eu",
        transport=httpx.MockTransport(handler),
    )


class TestInitiateAuthorization:
    """Tests for the authorization URL."""

    @pytest.mark.asyncio
    async def test_builds_authorization_url(self):
        client = make_client(lambda request: httpx.Response(500))

        url = await client.initiate_authorization("state-1", REDIRECT_URI)

        parsed = urlparse(url)
        params = parse_qs(parsed.query)
        assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == (
            "https://app.teamleader.eu/oauth2/authorize"
        )
        assert params["client_id"] == ["tl-client"]
        assert params["response_type"] == ["code"]
        assert params["redirect_uri"] == [REDIRECT_URI]
        assert params["state"] == ["state-1"]


class TestExchangeCode:
    """Tests for the code exchange."""

    @pytest.mark.asyncio
    async def test_returns_access_token(self):
        """The code is posted as a form with the client credentials."""
        # Arrange
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["form"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"access_token": "at-1"})

        client = make_client(handler)

        # Act
        token = await client.exchange_code("code-1", REDIRECT_URI)

        # Assert
        assert token == "at-1"
        assert seen["url"] == "https://app.teamleader.eu/oauth2/access_token"
        assert seen["form"]["code"] == ["code-1"]
        assert seen["form"]["client_id"] == ["tl-client"]
        assert seen["form"]["client_secret"] == ["tl-secret"]
        assert seen["form"]["grant_type"] == ["authorization_code"]

    @pytest.mark.asyncio
    async def test_rejected_code_raises_auth_error(self):
        client = make_client(
            lambda request: httpx.Response(400, json={"error": "invalid_grant"})
        )

        with pytest.raises(UpstreamAuthError) as exc_info:
            await client.exchange_code("bad", REDIRECT_URI)

        assert exc_info.value.status_code == 400
        assert exc_info.value.provider == "teamleader"

    @pytest.mark.asyncio
    async def test_timeout_raises_auth_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = make_client(handler)

        with pytest.raises(UpstreamAuthError, match="timed out"):
            await client.exchange_code("code-1", REDIRECT_URI)

    @pytest.mark.asyncio
    async def test_missing_access_token_raises_auth_error(self):
        client = make_client(lambda request: httpx.Response(200, json={}))

        with pytest.raises(UpstreamAuthError, match="no access_token"):
            await client.exchange_code("code-1", REDIRECT_URI)


class TestFetchProfile:
    """Tests for the profile fetch."""

    @pytest.mark.asyncio
    async def test_maps_user_to_profile(self):
        # Arrange
        body = {
            "data": {
                "id": "8b1c",
                "first_name": "Ann",
                "last_name": "Peeters",
                "email": "ann@example.com",
            }
        }

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/users.me"
            assert request.headers["Authorization"] == "Bearer at-1"
            return httpx.Response(200, json=body)

        client = make_client(handler)

        # Act
        profile = await client.fetch_profile("at-1")

        # Assert
        assert profile.provider == CrmProvider.TEAMLEADER
        assert profile.external_id == "8b1c"
        assert profile.email == "ann@example.com"
        assert profile.name == "Ann Peeters"
        assert profile.raw == body

    @pytest.mark.asyncio
    async def test_server_error_raises_profile_error(self):
        client = make_client(lambda request: httpx.Response(503))

        with pytest.raises(UpstreamProfileError) as exc_info:
            await client.fetch_profile("at-1")

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_missing_id_raises_profile_error(self):
        client = make_client(lambda request: httpx.Response(200, json={"data": {}}))

        with pytest.raises(UpstreamProfileError):
            await client.fetch_profile("at-1")

    @pytest.mark.asyncio
    async def test_invalid_json_raises_profile_error(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(UpstreamProfileError, match="invalid JSON"):
            await client.fetch_profile("at-1")
