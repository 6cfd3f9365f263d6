"""Tests for the Odoo OAuth client."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from voicelink.adapter.crm import RealOdooOAuthClient
from voicelink.adapter.error import UpstreamAuthError, UpstreamProfileError
from voicelink.domain.value import CrmProvider

REDIRECT_URI = "http://localhost:8000/auth/callback/odoo"


def make_client(handler) -> RealOdooOAuthClient:
    return RealOdooOAuthClient(
        client_id="odoo-client",
        client_secret="",
        transport=httpx.MockTransport(handler),
    )


class TestOdooOAuthClient:
    """Tests for the implicit flow."""

    @pytest.mark.asyncio
    async def test_authorization_requests_token_response(self):
        client = make_client(lambda request: httpx.Response(500))

        url = await client.initiate_authorization("state-1", REDIRECT_URI)

        params = parse_qs(urlparse(url).query)
        assert urlparse(url).path == "/oauth2/auth"
        assert params["response_type"] == ["token"]
        assert params["scope"] == ["userinfo"]
        assert params["state"] == ["state-1"]

    @pytest.mark.asyncio
    async def test_exchange_validates_token(self):
        """The callback token is checked against tokeninfo and returned as is."""
        # Arrange
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/oauth2/tokeninfo"
            assert request.url.params["access_token"] == "tok-1"
            return httpx.Response(200, json={"audience": "odoo-client", "user_id": 9})

        client = make_client(handler)

        # Act
        token = await client.exchange_code("tok-1", REDIRECT_URI)

        # Assert
        assert token == "tok-1"

    @pytest.mark.asyncio
    async def test_token_for_other_client_is_rejected(self):
        client = make_client(
            lambda request: httpx.Response(200, json={"audience": "someone-else"})
        )

        with pytest.raises(UpstreamAuthError, match="another client"):
            await client.exchange_code("tok-1", REDIRECT_URI)

    @pytest.mark.asyncio
    async def test_invalid_token_is_rejected(self):
        client = make_client(
            lambda request: httpx.Response(400, json={"error": "invalid_token"})
        )

        with pytest.raises(UpstreamAuthError):
            await client.exchange_code("tok-1", REDIRECT_URI)

    @pytest.mark.asyncio
    async def test_profile_from_tokeninfo(self):
        body = {"user_id": 9, "name": "Odette", "email": "odette@example.com"}
        client = make_client(lambda request: httpx.Response(200, json=body))

        profile = await client.fetch_profile("tok-1")

        assert profile.provider == CrmProvider.ODOO
        assert profile.external_id == "9"
        assert profile.email == "odette@example.com"
        assert profile.raw == body

    @pytest.mark.asyncio
    async def test_profile_without_user_id_fails(self):
        client = make_client(lambda request: httpx.Response(200, json={"name": "x"}))

        with pytest.raises(UpstreamProfileError):
            await client.fetch_profile("tok-1")
