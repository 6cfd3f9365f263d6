"""Domain model entities for VoiceLink."""

from voicelink.domain.model.account import Account
from voicelink.domain.model.otp_challenge import OtpChallenge
from voicelink.domain.model.provider_link import ProviderLink
from voicelink.domain.model.session import SessionHandle

__all__ = [
    "Account",
    "OtpChallenge",
    "ProviderLink",
    "SessionHandle",
]
