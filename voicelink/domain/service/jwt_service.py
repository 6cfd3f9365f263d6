"""JWT token domain service."""

from datetime import datetime

import logfire

from voicelink.config import AuthSettings
from voicelink.util.jwt import (
    TokenPayload,
    create_state_token,
    create_token,
    verify_state_token,
    verify_token,
)

from .base import Service


class JWTService(Service):
    """Domain service for JWT token operations."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, account_id: str, email: str) -> str:
        """Create the session cookie token for an account.

        Args:
            account_id: Account ID
            email: Account email

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_token", account_id=account_id):
            token = create_token(account_id, email, self.auth_settings)
            logfire.info("JWT token created", account_id=account_id)
            return token

    def create_magic_link_token(
        self, account_id: str, email: str, jti: str, expires_at: datetime
    ) -> str:
        """Create a single-use magic link token.

        Args:
            account_id: Account ID
            email: Account email
            jti: Unique token ID, recorded on redemption
            expires_at: Link expiry

        Returns:
            JWT token string
        """
        return create_token(
            account_id,
            email,
            self.auth_settings,
            token_type="magic_link",
            jti=jti,
            expires_at=expires_at,
        )

    def verify_token(self, token: str) -> TokenPayload:
        """Verify a session token and extract its payload.

        Args:
            token: JWT token string

        Returns:
            Token payload

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
                logfire.info("JWT token verified", account_id=payload.account_id)
                return payload
            except Exception as e:
                logfire.error("JWT token verification failed", error=str(e))
                raise

    def verify_magic_link_token(self, token: str) -> TokenPayload:
        """Verify a magic link token.

        Raises:
            JWTError: If token is invalid, expired, or not a magic link
        """
        return verify_token(token, self.auth_settings, expected_type="magic_link")

    def create_state_token(self, state: str) -> str:
        """Sign an OAuth state for the browser that started the login."""
        return create_state_token(state, self.auth_settings)

    def verify_state_token(self, token: str, state: str) -> None:
        """Check a callback's state against the signed one from the cookie.

        Raises:
            JWTError: If the token is invalid, expired, or for another state
        """
        try:
            verify_state_token(token, state, self.auth_settings)
        except Exception as e:
            logfire.warn("OAuth state rejected", error=str(e))
            raise
