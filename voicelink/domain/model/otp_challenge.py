"""OTP challenge entity."""

from datetime import datetime

from voicelink.domain.model.common import DomainModel
from voicelink.domain.value import AccountId


class OtpChallenge(DomainModel):
    """Outstanding one-time passcode for an account's WhatsApp number.

    Stored on the provider link; consuming it clears the code and marks the
    phone as verified.
    """

    account_id: AccountId
    phone: str
    code: str  # Six ASCII digits, compared as a string
    expires_at: datetime
