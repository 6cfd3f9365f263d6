"""Redeem session use case."""

import logfire
from pydantic import BaseModel

from voicelink.domain.repository import UnitOfWork
from voicelink.domain.service import JWTService, SessionService


class RedeemSessionRequest(BaseModel):
    """Magic link redemption request."""

    token: str


class RedeemSessionResponse(BaseModel):
    """Session cookie token for the redeemed account."""

    token: str
    account_id: str


class RedeemSessionUseCase:
    """Use case for exchanging a magic link for a session token."""

    def __init__(
        self,
        session_service: SessionService,
        jwt_service: JWTService,
        unit_of_work: UnitOfWork,
    ) -> None:
        """Initialize redeem session use case.

        Args:
            session_service: Magic link domain service
            jwt_service: JWT token domain service
            unit_of_work: Commits the redemption before the cookie is issued
        """
        self.session_service = session_service
        self.jwt_service = jwt_service
        self.unit_of_work = unit_of_work

    async def execute(self, request: RedeemSessionRequest) -> RedeemSessionResponse:
        """Redeem a magic link once and issue a session token.

        Raises:
            InvalidSessionError: If the link is invalid, expired or already used
        """
        payload = await self.session_service.redeem(request.token)
        await self.unit_of_work.commit()
        token = self.jwt_service.create_token(payload.account_id, payload.email)
        logfire.info("Session started", account_id=payload.account_id)
        return RedeemSessionResponse(token=token, account_id=payload.account_id)
