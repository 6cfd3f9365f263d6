"""One-time passcode generation and validation.

Pure functions only: nothing here reads or writes stored state.
"""

import secrets
from datetime import datetime, timedelta
from enum import Enum

from voicelink.domain.model.otp_challenge import OtpChallenge
from voicelink.domain.value.common import ValueObject

CODE_LENGTH = 6
DEFAULT_TTL_MINUTES = 10


class OtpFailureReason(str, Enum):
    """Why a submitted code was rejected."""

    INCORRECT_CODE = "IncorrectCode"
    EXPIRED = "Expired"


class OtpValidation(ValueObject):
    """Outcome of validating a submitted code."""

    valid: bool
    reason: OtpFailureReason | None = None


def generate_code() -> str:
    """Generate a uniformly distributed 6-digit code, leading zeros allowed."""
    return f"{secrets.randbelow(10**CODE_LENGTH):0{CODE_LENGTH}d}"


def expiry_from(now: datetime, ttl_minutes: int = DEFAULT_TTL_MINUTES) -> datetime:
    """Compute the expiry timestamp for a code issued at ``now``."""
    return now + timedelta(minutes=ttl_minutes)


def validate(challenge: OtpChallenge, submitted: str, now: datetime) -> OtpValidation:
    """Validate a submitted code against a stored challenge.

    Expiry is checked first: an expired challenge is rejected even when the
    submitted code matches. Codes are compared as strings, so "007" and "7"
    are different codes.

    Args:
        challenge: Stored challenge
        submitted: Code entered by the user (surrounding whitespace ignored)
        now: Current time

    Returns:
        Validation outcome with the failure reason, if any
    """
    if now >= challenge.expires_at:
        return OtpValidation(valid=False, reason=OtpFailureReason.EXPIRED)

    if not secrets.compare_digest(
        submitted.strip().encode("utf-8"), challenge.code.encode("utf-8")
    ):
        return OtpValidation(valid=False, reason=OtpFailureReason.INCORRECT_CODE)

    return OtpValidation(valid=True)
