"""Session issuance domain service."""

import secrets
from datetime import datetime, timedelta, timezone
from urllib.parse import urlencode
from uuid import UUID

import jwt
import logfire

from voicelink.config import AuthSettings
from voicelink.domain.error import InvalidSessionError, SessionIssuanceError
from voicelink.domain.model import Account, SessionHandle
from voicelink.domain.repository import SessionRedemptionRepository
from voicelink.domain.value import AccountId
from voicelink.util.jwt import JWTError, TokenPayload

from .base import Service
from .jwt_service import JWTService


class SessionService(Service):
    """Issues and redeems single-use magic links.

    A magic link carries a signed token with a unique ID. Redeeming it records
    the ID, so a second redemption of the same link is rejected.
    """

    def __init__(
        self,
        jwt_service: JWTService,
        session_redemption_repository: SessionRedemptionRepository,
        auth_settings: AuthSettings,
        base_url: str,
    ) -> None:
        """Initialize session service.

        Args:
            jwt_service: JWT token domain service
            session_redemption_repository: Store of redeemed token IDs
            auth_settings: Authentication settings
            base_url: Public base URL of this API
        """
        self.jwt_service = jwt_service
        self.session_redemption_repository = session_redemption_repository
        self.auth_settings = auth_settings
        self.base_url = base_url

    def issue(self, account: Account) -> SessionHandle:
        """Issue a magic link for an account.

        Args:
            account: Account the link signs into

        Returns:
            Session handle with the magic link URL

        Raises:
            SessionIssuanceError: If the token cannot be signed
        """
        with logfire.span("session_service.issue", account_id=str(account.id)):
            if not self.auth_settings.jwt_secret:
                raise SessionIssuanceError("Session signing secret is not configured")

            expires_at = datetime.now(timezone.utc) + timedelta(
                minutes=self.auth_settings.magic_link_expiry_minutes
            )
            try:
                token = self.jwt_service.create_magic_link_token(
                    account_id=str(account.id),
                    email=account.email,
                    jti=secrets.token_urlsafe(24),
                    expires_at=expires_at,
                )
            except (jwt.PyJWTError, NotImplementedError, TypeError) as e:
                logfire.error("Magic link signing failed", error=str(e))
                raise SessionIssuanceError(f"Could not issue session: {e}") from e

            logfire.info("Magic link issued", account_id=str(account.id))
            return SessionHandle(
                account_id=account.id,
                email=account.email,
                session_url=f"{self.base_url}/auth/session?{urlencode({'token': token})}",
                expires_at=expires_at,
            )

    async def redeem(self, token: str) -> TokenPayload:
        """Redeem a magic link token once.

        Args:
            token: Token from the magic link

        Returns:
            Payload of the redeemed token

        Raises:
            InvalidSessionError: If the token is invalid, expired, or already used
        """
        with logfire.span("session_service.redeem"):
            try:
                payload = self.jwt_service.verify_magic_link_token(token)
            except JWTError as e:
                logfire.warn("Magic link rejected", error=str(e))
                raise InvalidSessionError(str(e)) from e

            if not payload.jti:
                raise InvalidSessionError("Magic link has no token ID")

            first_use = await self.session_redemption_repository.consume(
                payload.jti, AccountId(UUID(payload.account_id)), payload.exp
            )
            if not first_use:
                logfire.warn(
                    "Magic link replayed", account_id=payload.account_id
                )
                raise InvalidSessionError("Magic link has already been used")

            purged = await self.session_redemption_repository.purge_expired(
                datetime.now(timezone.utc)
            )
            logfire.info(
                "Magic link redeemed",
                account_id=payload.account_id,
                purged_redemptions=purged,
            )
            return payload
