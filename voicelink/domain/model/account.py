"""Account entity.

The internal identity every CRM login resolves to.
"""

from datetime import datetime, timezone

from pydantic import Field

from voicelink.domain.model.common import DomainModel
from voicelink.domain.value import AccountId


class Account(DomainModel):
    """Internal authentication account.

    Created once per distinct external user. The email is unique across all
    accounts; providers that do not share an email get a placeholder address.
    """

    id: AccountId
    email: str
    display_name: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
