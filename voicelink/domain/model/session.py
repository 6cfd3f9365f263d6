"""Session handle returned after identity resolution."""

from datetime import datetime

from voicelink.domain.model.common import DomainModel
from voicelink.domain.value import AccountId


class SessionHandle(DomainModel):
    """Single-use magic link addressed to an account.

    Redeeming ``session_url`` once sets the session cookie.
    """

    account_id: AccountId
    email: str
    session_url: str
    expires_at: datetime
