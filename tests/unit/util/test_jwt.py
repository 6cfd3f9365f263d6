"""Tests for the OAuth state tokens."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from voicelink.config import AuthSettings
from voicelink.util.jwt import (
    JWTError,
    create_state_token,
    create_token,
    verify_state_token,
)

SETTINGS = AuthSettings(jwt_secret="test-secret")


class TestStateToken:
    """Tests for create_state_token and verify_state_token."""

    def test_matching_state_is_accepted(self):
        token = create_state_token("abc", SETTINGS)

        verify_state_token(token, "abc", SETTINGS)

    def test_other_state_is_rejected(self):
        token = create_state_token("abc", SETTINGS)

        with pytest.raises(JWTError, match="State mismatch"):
            verify_state_token(token, "abd", SETTINGS)

    def test_expired_state_is_rejected(self):
        expired = jwt.encode(
            {
                "state": "abc",
                "type": "oauth_state",
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            SETTINGS.jwt_secret,
            algorithm=SETTINGS.jwt_algorithm,
        )

        with pytest.raises(JWTError, match="expired"):
            verify_state_token(expired, "abc", SETTINGS)

    def test_token_signed_with_other_secret_is_rejected(self):
        token = create_state_token("abc", AuthSettings(jwt_secret="other-secret"))

        with pytest.raises(JWTError, match="Invalid state token"):
            verify_state_token(token, "abc", SETTINGS)

    def test_session_token_is_not_a_state(self):
        """A session cookie value cannot stand in for the state cookie."""
        token = create_token("acc-1", "ann@example.com", SETTINGS)

        with pytest.raises(JWTError, match="Invalid token type"):
            verify_state_token(token, "abc", SETTINGS)
