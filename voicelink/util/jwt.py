"""JWT token utilities."""

import hmac
from datetime import datetime, timedelta, timezone
from typing import Literal

import jwt
from pydantic import BaseModel

from voicelink.config import AuthSettings

TokenType = Literal["session", "magic_link"]


class TokenPayload(BaseModel):
    """JWT token payload."""

    account_id: str
    email: str
    type: TokenType
    jti: str | None = None
    exp: datetime


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(
    account_id: str,
    email: str,
    settings: AuthSettings,
    token_type: TokenType = "session",
    jti: str | None = None,
    expires_at: datetime | None = None,
) -> str:
    """Create a JWT token for the account.

    Args:
        account_id: Account ID
        email: Account email
        settings: Authentication settings
        token_type: "session" for the auth cookie, "magic_link" for single-use links
        jti: Token ID, required for single-use tokens
        expires_at: Explicit expiry, defaults to jwt_expiry_days from now

    Returns:
        Encoded JWT token
    """
    expiry = expires_at or datetime.now(timezone.utc) + timedelta(
        days=settings.jwt_expiry_days
    )

    payload = {
        "account_id": account_id,
        "email": email,
        "type": token_type,
        "exp": expiry,
    }
    if jti is not None:
        payload["jti"] = jti

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(
    token: str, settings: AuthSettings, expected_type: TokenType = "session"
) -> TokenPayload:
    """Verify and decode a JWT token.

    Args:
        token: JWT token to verify
        settings: Authentication settings
        expected_type: Token type the caller accepts

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid, expired, or of another type
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
        decoded = TokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except (jwt.InvalidTokenError, ValueError):
        raise JWTError("Invalid token")

    if decoded.type != expected_type:
        raise JWTError("Invalid token type")
    return decoded


def create_state_token(state: str, settings: AuthSettings) -> str:
    """Create a short-lived token binding an OAuth state to the browser.

    Args:
        state: State parameter sent to the provider
        settings: Authentication settings

    Returns:
        Encoded JWT token of type "oauth_state"
    """
    expiry = datetime.now(timezone.utc) + timedelta(
        minutes=settings.oauth_state_expiry_minutes
    )
    payload = {"state": state, "type": "oauth_state", "exp": expiry}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_state_token(token: str, state: str, settings: AuthSettings) -> None:
    """Check that a callback's state matches the one issued to this browser.

    Raises:
        JWTError: If the token is invalid, expired, or carries another state
    """
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("State has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid state token")

    if payload.get("type") != "oauth_state":
        raise JWTError("Invalid token type")
    if not hmac.compare_digest(str(payload.get("state", "")), state):
        raise JWTError("State mismatch")
