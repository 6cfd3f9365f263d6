"""Session cookie helpers shared by the routes."""

from fastapi import HTTPException, Response, status

from voicelink.config import Settings
from voicelink.domain.service import JWTService
from voicelink.util.jwt import JWTError, TokenPayload

COOKIE_NAME = "auth_token"
STATE_COOKIE_NAME = "oauth_state"
STATE_COOKIE_PATH = "/auth/callback"


def require_session(auth_token: str | None, jwt_service: JWTService) -> TokenPayload:
    """Verify the session cookie.

    Raises:
        HTTPException: 401 if the cookie is missing, invalid or expired
    """
    if not auth_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    try:
        return jwt_service.verify_token(auth_token)
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )


def require_same_account(payload: TokenPayload, account_id: object) -> None:
    """Reject requests that act on an account other than the session's.

    Raises:
        HTTPException: 403 on mismatch
    """
    if payload.account_id != str(account_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to act on another account",
        )


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    """Set the HTTP-only session cookie.

    Production runs the API and the frontend on different subdomains, which
    needs SameSite=None and Secure.
    """
    is_production = settings.environment == "production"
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        httponly=True,
        secure=is_production,
        samesite="none" if is_production else "lax",
        domain=settings.auth.cookie_domain,
        path="/",
        max_age=settings.auth.jwt_expiry_days * 24 * 60 * 60,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Delete the session cookie with the attributes it was set with."""
    response.delete_cookie(
        key=COOKIE_NAME,
        domain=settings.auth.cookie_domain,
        path="/",
    )


def set_state_cookie(response: Response, token: str, settings: Settings) -> None:
    """Set the signed OAuth state cookie, readable only by the callback."""
    is_production = settings.environment == "production"
    response.set_cookie(
        key=STATE_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=is_production,
        samesite="none" if is_production else "lax",
        domain=settings.auth.cookie_domain,
        path=STATE_COOKIE_PATH,
        max_age=settings.auth.oauth_state_expiry_minutes * 60,
    )


def clear_state_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=STATE_COOKIE_NAME,
        domain=settings.auth.cookie_domain,
        path=STATE_COOKIE_PATH,
    )
