"""Authentication routes."""

import logging
from urllib.parse import urlencode

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from voicelink.adapter.error import AdapterError, UpstreamAuthError
from voicelink.application.usecase.auth import (
    GetCurrentAccountUseCase,
    InitiateLoginUseCase,
    LoginUseCase,
    RedeemSessionUseCase,
)
from voicelink.application.usecase.auth.get_current_account import (
    GetCurrentAccountRequest,
    GetCurrentAccountResponse,
)
from voicelink.application.usecase.auth.initiate_login import (
    InitiateLoginRequest,
    InitiateLoginResponse,
)
from voicelink.application.usecase.auth.login import LoginRequest, LoginResponse
from voicelink.application.usecase.auth.redeem_session import RedeemSessionRequest
from voicelink.config import Settings
from voicelink.domain.error import DomainError, InvalidSessionError, NotFoundError
from voicelink.domain.service import JWTService
from voicelink.domain.value import CrmProvider
from voicelink.interface.api.auth import (
    clear_session_cookie,
    clear_state_cookie,
    set_session_cookie,
    set_state_cookie,
)
from voicelink.util.error import UtilError
from voicelink.util.jwt import JWTError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


class CallbackRequest(BaseModel):
    """Callback parameters posted by the frontend."""

    code: str
    redirect_uri: str | None = None


class LogoutResponse(BaseModel):
    """Logout response."""

    success: bool
    message: str


class AuthStatusResponse(BaseModel):
    """Response for checking authentication status.

    Used by /auth/me to return the current account if authenticated,
    or indicate unauthenticated state without raising an error.
    """

    authenticated: bool
    account: GetCurrentAccountResponse | None = None


def _error_redirect(settings: Settings, error: Exception) -> RedirectResponse:
    """Redirect to the frontend's retry page with the error kind."""
    query = urlencode(
        {
            "error": getattr(error, "kind", "unexpected"),
            "message": str(error),
        }
    )
    return RedirectResponse(
        url=f"{settings.api.frontend_url}/auth/error?{query}",
        status_code=status.HTTP_302_FOUND,
    )


@router.post("/login", response_model=InitiateLoginResponse)
async def initiate_login(
    request: InitiateLoginRequest,
    response: Response,
    initiate_login_use_case: FromDishka[InitiateLoginUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
) -> InitiateLoginResponse:
    """Initiate OAuth login with a CRM.

    Examples:
        POST /auth/login
        {
            "provider": "teamleader"
        }

        Response:
        {
            "authorization_url": "https://app.teamleader.eu/oauth2/authorize?...",
            "state": "..."
        }

        Sets cookie: oauth_state
    """
    logger.info(f"Initiating {request.provider.value} login")
    login = await initiate_login_use_case.execute(request)
    # The callback only accepts the state signed into this cookie
    set_state_cookie(response, jwt_service.create_state_token(login.state), settings)
    return login


@router.post("/callback/{provider}", response_model=LoginResponse)
async def complete_login(
    provider: CrmProvider,
    request: CallbackRequest,
    login_use_case: FromDishka[LoginUseCase],
) -> LoginResponse:
    """Complete login from a callback relayed by the frontend.

    Odoo uses the implicit flow and delivers the access token in the URL
    fragment, which only the browser sees; the frontend posts it here as
    ``code``.

    Returns:
        ``{success, session_url, account_id, expires_at}``; failures are
        returned as ``{success: false, error, kind}``
    """
    logger.info(f"OAuth callback posted: provider={provider.value}")
    return await login_use_case.execute(
        LoginRequest(
            provider=provider,
            code=request.code,
            redirect_uri=request.redirect_uri,
        )
    )


@router.get("/callback/{provider}")
async def oauth_callback(
    provider: CrmProvider,
    login_use_case: FromDishka[LoginUseCase],
    jwt_service: FromDishka[JWTService],
    settings: FromDishka[Settings],
    code: str | None = None,
    access_token: str | None = None,
    state: str | None = None,
    error: str | None = None,
    oauth_state: str | None = Cookie(default=None),
):
    """Handle the provider's OAuth redirect.

    On success the browser is sent on to the magic link, which starts the
    session. Failures go to the frontend error page, which offers a retry.
    The ``state`` must match the one signed into the ``oauth_state`` cookie
    by ``/auth/login`` in the same browser.

    Example:
        GET /auth/callback/teamleader?code=abc123&state=xyz789

        Redirects to: https://api.voicelink.app/auth/session?token=...
    """
    logger.info(f"OAuth callback received: provider={provider.value}, state={state}")

    credential = code or access_token
    if error or not credential:
        logger.warning(f"OAuth callback without code: provider={provider.value}, error={error}")
        return RedirectResponse(
            url=f"{settings.api.frontend_url}/auth/error?"
            + urlencode(
                {
                    "error": "UpstreamAuthError",
                    "message": error or "Authorization was not granted",
                }
            ),
            status_code=status.HTTP_302_FOUND,
        )

    try:
        if not state or not oauth_state:
            raise JWTError("Missing OAuth state")
        jwt_service.verify_state_token(oauth_state, state)
    except JWTError as e:
        logger.warning(f"OAuth callback state rejected: provider={provider.value}, {e}")
        return _error_redirect(
            settings, UpstreamAuthError(str(e), provider=provider.value)
        )

    try:
        login_response = await login_use_case.execute(
            LoginRequest(provider=provider, code=credential)
        )
    except (DomainError, AdapterError, UtilError) as e:
        logger.error(f"Login failed during OAuth callback: {e!r}")
        return _error_redirect(settings, e)

    logger.info(f"Login successful for account: {login_response.account_id}")
    redirect_response = RedirectResponse(
        url=login_response.session_url,
        status_code=status.HTTP_302_FOUND,
    )
    clear_state_cookie(redirect_response, settings)
    return redirect_response


@router.get("/session")
async def redeem_session(
    token: str,
    redeem_session_use_case: FromDishka[RedeemSessionUseCase],
    settings: FromDishka[Settings],
):
    """Redeem a magic link and set the session cookie.

    Each link works once; a second visit goes to the error page.

    Example:
        GET /auth/session?token=...

        Redirects to: https://voicelink.app/dashboard
        Sets cookie: auth_token
    """
    try:
        session = await redeem_session_use_case.execute(
            RedeemSessionRequest(token=token)
        )
    except InvalidSessionError as e:
        logger.warning(f"Magic link rejected: {e}")
        return _error_redirect(settings, e)

    redirect_response = RedirectResponse(
        url=f"{settings.api.frontend_url}/dashboard",
        status_code=status.HTTP_302_FOUND,
    )
    # Cookies must be set on the returned response object
    set_session_cookie(redirect_response, session.token, settings)
    logger.info(f"Session cookie set for account: {session.account_id}")
    return redirect_response


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    settings: FromDishka[Settings],
) -> LogoutResponse:
    """Logout by clearing the session cookie."""
    clear_session_cookie(response, settings)
    return LogoutResponse(success=True, message="Successfully logged out")


@router.get("/me", response_model=AuthStatusResponse)
async def get_current_account(
    get_current_account_use_case: FromDishka[GetCurrentAccountUseCase],
    auth_token: str | None = Cookie(default=None),
) -> AuthStatusResponse:
    """Get current account if authenticated, or return unauthenticated status.

    This endpoint is safe to call without authentication - it will return
    authenticated=false instead of raising an error.
    """
    if not auth_token:
        return AuthStatusResponse(authenticated=False)

    try:
        account = await get_current_account_use_case.execute(
            GetCurrentAccountRequest(token=auth_token)
        )
        return AuthStatusResponse(authenticated=True, account=account)

    except JWTError:
        # Invalid or expired token - this is expected behavior, not an error
        return AuthStatusResponse(authenticated=False)
    except NotFoundError:
        # Token valid but account gone
        return AuthStatusResponse(authenticated=False)
