"""End-to-end tests for WhatsApp verification and invitations."""

from urllib.parse import urlparse
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from voicelink.adapter.whatsapp import MockWhatsAppSender
from voicelink.interface.api.app import create_app
from tests.di import build_test_container

PHONE = "+3212345678"


@pytest.fixture
def client():
    """Create test client backed by the mock container."""
    with TestClient(create_app(build_test_container())) as test_client:
        yield test_client


def sign_in(client: TestClient, provider: str = "teamleader", code: str = "ann") -> str:
    """Log in through the mock CRM and redeem the magic link.

    Returns:
        The signed-in account ID
    """
    login = client.post(f"/auth/callback/{provider}", json={"code": code}).json()
    session_url = urlparse(login["session_url"])
    client.get(f"{session_url.path}?{session_url.query}", follow_redirects=False)
    return login["account_id"]


def sender(client: TestClient) -> MockWhatsAppSender:
    container = client.app.state.dishka_container
    return client.portal.call(container.get, MockWhatsAppSender)


class TestOtpFlow:
    """Tests for the OTP endpoints."""

    def test_send_and_verify(self, client):
        """A signed-in user verifies their number with the code sent to it."""
        # Arrange
        account_id = sign_in(client)
        body = {"provider": "teamleader", "account_id": account_id}

        # Act
        sent = client.post("/whatsapp/otp/send", json={**body, "phone": PHONE})
        code = sender(client).last_code(PHONE)
        verified = client.post("/whatsapp/otp/verify", json={**body, "code": code})
        status = client.get("/whatsapp/status", params=body)

        # Assert
        assert sent.status_code == 200
        assert sent.json()["success"] is True
        assert verified.status_code == 200
        assert verified.json()["whatsapp_number"] == PHONE
        assert status.json() == {"status": "active", "whatsapp_number": PHONE}

    def test_wrong_code_reports_reason(self, client):
        # Arrange
        account_id = sign_in(client)
        body = {"provider": "teamleader", "account_id": account_id}
        client.post("/whatsapp/otp/send", json={**body, "phone": PHONE})
        code = sender(client).last_code(PHONE)
        wrong = "000000" if code != "000000" else "111111"

        # Act
        response = client.post("/whatsapp/otp/verify", json={**body, "code": wrong})

        # Assert
        assert response.status_code == 400
        assert response.json()["kind"] == "IncorrectCode"

    def test_invalid_phone_is_rejected(self, client):
        account_id = sign_in(client)

        response = client.post(
            "/whatsapp/otp/send",
            json={"provider": "teamleader", "account_id": account_id, "phone": "0471"},
        )

        assert response.status_code == 422

    def test_delivery_failure_is_bad_gateway(self, client):
        # Arrange
        account_id = sign_in(client)
        sender(client).fail = True

        # Act
        response = client.post(
            "/whatsapp/otp/send",
            json={"provider": "teamleader", "account_id": account_id, "phone": PHONE},
        )

        # Assert
        assert response.status_code == 502
        assert response.json()["kind"] == "DeliveryError"

    def test_requires_session(self, client):
        response = client.post(
            "/whatsapp/otp/send",
            json={"provider": "teamleader", "account_id": str(uuid4()), "phone": PHONE},
        )

        assert response.status_code == 401

    def test_cannot_act_on_other_account(self, client):
        sign_in(client)

        response = client.get(
            "/whatsapp/status",
            params={"provider": "teamleader", "account_id": str(uuid4())},
        )

        assert response.status_code == 403


class TestInvitationFlow:
    """Tests for the invitation endpoints."""

    def test_invite_accept_and_remove(self, client):
        """An owner invites a teammate, who accepts; the owner then removes them."""
        # Arrange
        sign_in(client, "pipedrive", "owner")
        created = client.post(
            "/invitations",
            json={
                "provider": "pipedrive",
                "external_id": "pd-mate",
                "email": "mate@example.com",
                "phone": PHONE,
            },
        )
        invitation = created.json()

        # Act - the teammate signs in through Pipedrive and accepts
        owner_cookie = client.cookies.get("auth_token")
        member_id = sign_in(client, "pipedrive", "mate")
        accepted = client.post(
            "/invitations/accept",
            json={"provider": "pipedrive", "token": invitation["token"]},
        )

        # Assert
        assert created.status_code == 201
        assert member_id == invitation["account_id"]
        assert accepted.status_code == 200
        assert sender(client).last_code(PHONE) is not None

        # Act - the owner removes the teammate
        removed = client.delete(
            f"/invitations/members/pipedrive/{member_id}",
            headers={"Cookie": f"auth_token={owner_cookie}"},
        )

        # Assert
        assert removed.status_code == 200
        assert removed.json() == {"success": True}

    def test_existing_user_cannot_be_invited(self, client):
        """Inviting a CRM user who already signed up is refused."""
        # Arrange
        user_id = sign_in(client, "pipedrive", "mate")
        sign_in(client, "pipedrive", "owner")

        # Act
        response = client.post(
            "/invitations",
            json={
                "provider": "pipedrive",
                "external_id": "pd-mate",
                "phone": PHONE,
            },
        )
        removed = client.delete(f"/invitations/members/pipedrive/{user_id}")

        # Assert
        assert response.status_code == 409
        assert response.json()["kind"] == "InvitationConflict"
        assert removed.status_code == 404

    def test_accept_with_wrong_token(self, client):
        sign_in(client, "pipedrive", "mate")

        response = client.post(
            "/invitations/accept",
            json={"provider": "pipedrive", "token": "nope"},
        )

        assert response.status_code == 404
        assert response.json()["kind"] == "TokenMismatch"
