"""Interface layer error handling.

Maps domain, adapter and configuration errors onto JSON responses of the
form ``{"success": false, "error": <message>, "kind": <kind>}``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from voicelink.adapter.error import (
    AdapterError,
    DeliveryError,
    UpstreamAuthError,
    UpstreamProfileError,
)
from voicelink.domain.error import (
    AccountCreationError,
    ChallengeExpiredError,
    DomainError,
    IncorrectCodeError,
    InvitationConflictError,
    InvalidSessionError,
    NotFoundError,
    PersistenceError,
    SessionIssuanceError,
    TokenExpiredError,
    TokenMismatchError,
)
from voicelink.util.error import UtilError

logger = logging.getLogger(__name__)

# Checked in order, so subclasses come before their bases
STATUS_CODES: list[tuple[type[Exception], int]] = [
    (UpstreamAuthError, status.HTTP_400_BAD_REQUEST),
    (UpstreamProfileError, status.HTTP_502_BAD_GATEWAY),
    (DeliveryError, status.HTTP_502_BAD_GATEWAY),
    (IncorrectCodeError, status.HTTP_400_BAD_REQUEST),
    (ChallengeExpiredError, status.HTTP_400_BAD_REQUEST),
    (TokenExpiredError, status.HTTP_400_BAD_REQUEST),
    (InvalidSessionError, status.HTTP_400_BAD_REQUEST),
    (TokenMismatchError, status.HTTP_404_NOT_FOUND),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (AccountCreationError, status.HTTP_409_CONFLICT),
    (InvitationConflictError, status.HTTP_409_CONFLICT),
    (SessionIssuanceError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (PersistenceError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def status_code_for(error: Exception) -> int:
    """HTTP status code for an application error."""
    for error_type, code in STATUS_CODES:
        if isinstance(error, error_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(error: Exception) -> dict:
    """JSON body for an application error."""
    return {
        "success": False,
        "error": str(error),
        "kind": getattr(error, "kind", type(error).__name__),
    }


async def handle_application_error(request: Request, exc: Exception) -> JSONResponse:
    """Translate an application error into a JSON response."""
    code = status_code_for(exc)
    if code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc!r}")
    return JSONResponse(status_code=code, content=error_body(exc))


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers for all application error hierarchies."""
    app.add_exception_handler(DomainError, handle_application_error)
    app.add_exception_handler(AdapterError, handle_application_error)
    app.add_exception_handler(UtilError, handle_application_error)
