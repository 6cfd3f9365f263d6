"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from voicelink.domain.model import OtpChallenge
from voicelink.domain.value import AccountId, CrmProfile, CrmProvider


def make_profile(
    provider: CrmProvider = CrmProvider.TEAMLEADER,
    external_id: str | None = None,
    email: str | None = None,
    name: str | None = "Test User",
) -> CrmProfile:
    """Helper function to build CRM profiles for tests.

    Args:
        provider: CRM the profile comes from
        external_id: User ID on the CRM, random when omitted
        email: Profile email, None mimics a CRM that shares no email
        name: Display name

    Returns:
        CrmProfile with a raw snapshot mirroring the fields
    """
    external_id = external_id or f"ext-{uuid4().hex[:12]}"
    return CrmProfile(
        provider=provider,
        external_id=external_id,
        email=email,
        name=name,
        raw={"id": external_id, "email": email, "name": name},
    )


def make_challenge(
    code: str = "123456",
    phone: str = "+3212345678",
    expires_at: datetime | None = None,
) -> OtpChallenge:
    """Helper function to build an OTP challenge expiring in 10 minutes."""
    return OtpChallenge(
        account_id=AccountId(uuid4()),
        phone=phone,
        code=code,
        expires_at=expires_at or datetime.now(timezone.utc) + timedelta(minutes=10),
    )
