"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from voicelink.domain.model import Account, OtpChallenge, ProviderLink
from voicelink.domain.value import (
    AccountId,
    CrmProvider,
    InvitationStatus,
    ProviderLinkId,
    WhatsAppStatus,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_account(row: Dict[str, Any]) -> Account:
    """Convert database row to Account domain model.

    Args:
        row: Database row as dict

    Returns:
        Account domain model
    """
    return Account(
        id=AccountId(_uuid(row["id"])),
        email=row["email"],
        display_name=row.get("display_name"),
        created_at=row["created_at"],
    )


def account_to_dict(account: Account) -> Dict[str, Any]:
    """Convert Account domain model to database dict."""
    return account.model_dump()


def row_to_provider_link(row: Dict[str, Any], provider: CrmProvider) -> ProviderLink:
    """Convert a provider table row to ProviderLink domain model.

    Args:
        row: Database row as dict
        provider: Provider the row's table belongs to

    Returns:
        ProviderLink domain model
    """
    invitation_status = row.get("invitation_status")
    invited_by = row.get("invited_by")
    return ProviderLink(
        id=ProviderLinkId(_uuid(row["id"])),
        account_id=AccountId(_uuid(row["account_id"])),
        provider=provider,
        external_id=row["external_id"],
        profile=row.get("profile") or {},
        whatsapp_number=row.get("whatsapp_number"),
        whatsapp_status=WhatsAppStatus(row.get("whatsapp_status") or "not_set"),
        otp_code=row.get("whatsapp_otp_code"),
        otp_phone=row.get("whatsapp_otp_phone"),
        otp_expires_at=row.get("whatsapp_otp_expires_at"),
        invitation_token=row.get("invitation_token"),
        invitation_expires_at=row.get("invitation_token_expires_at"),
        invitation_status=(
            InvitationStatus(invitation_status) if invitation_status else None
        ),
        invitation_email=row.get("invitation_email"),
        invitation_phone=row.get("invitation_phone"),
        invited_by=AccountId(_uuid(invited_by)) if invited_by else None,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        deleted_at=row.get("deleted_at"),
    )


def provider_link_to_dict(link: ProviderLink) -> Dict[str, Any]:
    """Convert ProviderLink domain model to a provider table dict.

    Args:
        link: ProviderLink domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return {
        "id": link.id,
        "account_id": link.account_id,
        "external_id": link.external_id,
        "profile": link.profile,
        "whatsapp_number": link.whatsapp_number,
        "whatsapp_status": link.whatsapp_status.value,
        "whatsapp_otp_code": link.otp_code,
        "whatsapp_otp_phone": link.otp_phone,
        "whatsapp_otp_expires_at": link.otp_expires_at,
        "invitation_token": link.invitation_token,
        "invitation_token_expires_at": link.invitation_expires_at,
        "invitation_status": (
            link.invitation_status.value if link.invitation_status else None
        ),
        "invitation_email": link.invitation_email,
        "invitation_phone": link.invitation_phone,
        "invited_by": link.invited_by,
        "created_at": link.created_at,
        "updated_at": link.updated_at,
        "deleted_at": link.deleted_at,
    }


def row_to_otp_challenge(row: Dict[str, Any]) -> OtpChallenge | None:
    """Extract the embedded OTP challenge from a provider table row.

    Returns:
        The challenge, or None when no code is stored
    """
    if not row.get("whatsapp_otp_code"):
        return None
    return OtpChallenge(
        account_id=AccountId(_uuid(row["account_id"])),
        phone=row["whatsapp_otp_phone"],
        code=row["whatsapp_otp_code"],
        expires_at=row["whatsapp_otp_expires_at"],
    )
