"""WhatsApp verification routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie

from voicelink.application.usecase.whatsapp import (
    GetWhatsAppStatusUseCase,
    SendOtpUseCase,
    VerifyOtpUseCase,
)
from voicelink.application.usecase.whatsapp.get_status import (
    GetWhatsAppStatusRequest,
    GetWhatsAppStatusResponse,
)
from voicelink.application.usecase.whatsapp.send_otp import (
    SendOtpRequest,
    SendOtpResponse,
)
from voicelink.application.usecase.whatsapp.verify_otp import (
    VerifyOtpRequest,
    VerifyOtpResponse,
)
from voicelink.domain.service import JWTService
from voicelink.domain.value import CrmProvider
from voicelink.interface.api.auth import require_same_account, require_session

router = APIRouter(prefix="/whatsapp", tags=["whatsapp"], route_class=DishkaRoute)


@router.post("/otp/send", response_model=SendOtpResponse)
async def send_otp(
    request: SendOtpRequest,
    send_otp_use_case: FromDishka[SendOtpUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> SendOtpResponse:
    """Send a verification code to a WhatsApp number.

    A new request replaces any code still outstanding.

    Example:
        POST /whatsapp/otp/send
        {
            "provider": "teamleader",
            "account_id": "...",
            "phone": "+3212345678"
        }

        Response:
        {
            "success": true,
            "expires_at": "2025-01-01T12:10:00Z"
        }
    """
    payload = require_session(auth_token, jwt_service)
    require_same_account(payload, request.account_id)
    return await send_otp_use_case.execute(request)


@router.post("/otp/verify", response_model=VerifyOtpResponse)
async def verify_otp(
    request: VerifyOtpRequest,
    verify_otp_use_case: FromDishka[VerifyOtpUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> VerifyOtpResponse:
    """Submit a verification code.

    Failures carry the reason, ``IncorrectCode`` or ``Expired``, so the
    client can offer to re-enter the code or request a new one.
    """
    payload = require_session(auth_token, jwt_service)
    require_same_account(payload, request.account_id)
    return await verify_otp_use_case.execute(request)


@router.get("/status", response_model=GetWhatsAppStatusResponse)
async def get_status(
    provider: CrmProvider,
    account_id: UUID,
    get_status_use_case: FromDishka[GetWhatsAppStatusUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
) -> GetWhatsAppStatusResponse:
    """Get the verification state of an account's WhatsApp number."""
    payload = require_session(auth_token, jwt_service)
    require_same_account(payload, account_id)
    return await get_status_use_case.execute(
        GetWhatsAppStatusRequest(provider=provider, account_id=account_id)
    )
