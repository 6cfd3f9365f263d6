"""SQLAlchemy table definitions for VoiceLink.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

from voicelink.domain.value import CrmProvider

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# ACCOUNTS TABLE (Provider-agnostic)
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default=text("uuid_generate_v4()")),
    Column("email", String(255), nullable=False, unique=True),
    Column("display_name", String(255), nullable=True),
    Column(
        "created_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    ),
)


# ============================================================================
# PROVIDER LINK TABLES (one per CRM)
# ============================================================================
def _provider_link_table(provider: CrmProvider) -> Table:
    """Build the link table for one CRM provider.

    Every provider table has the same shape: the link itself, the embedded
    OTP challenge, the WhatsApp status and the invitation columns.
    """
    name = f"{provider.value}_users"
    table = Table(
        name,
        metadata,
        Column(
            "id", UUID, primary_key=True, server_default=text("uuid_generate_v4()")
        ),
        Column(
            "account_id",
            UUID,
            ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        Column("external_id", String(255), nullable=False),
        Column("profile", JSONB, nullable=False, server_default=text("'{}'::jsonb")),
        # WhatsApp verification
        Column("whatsapp_number", String(32), nullable=True),
        Column(
            "whatsapp_status",
            String(16),
            nullable=False,
            server_default=text("'not_set'"),
        ),
        Column("whatsapp_otp_code", String(6), nullable=True),
        Column("whatsapp_otp_phone", String(32), nullable=True),
        Column("whatsapp_otp_expires_at", TIMESTAMP(timezone=True), nullable=True),
        # Invitation
        Column("invitation_token", String(255), nullable=True, unique=True),
        Column("invitation_token_expires_at", TIMESTAMP(timezone=True), nullable=True),
        Column("invitation_status", String(16), nullable=True),
        Column("invitation_email", String(255), nullable=True),
        Column("invitation_phone", String(32), nullable=True),
        Column(
            "invited_by",
            UUID,
            ForeignKey("accounts.id", ondelete="SET NULL"),
            nullable=True,
        ),
        Column(
            "created_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=text("NOW()"),
        ),
        Column(
            "updated_at",
            TIMESTAMP(timezone=True),
            nullable=False,
            server_default=text("NOW()"),
        ),
        Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    )

    # At most one active link per external user
    Index(
        f"uq_{name}_external_id_active",
        table.c.external_id,
        unique=True,
        postgresql_where=table.c.deleted_at.is_(None),
    )
    Index(f"idx_{name}_account_id", table.c.account_id)
    return table


teamleader_users_table = _provider_link_table(CrmProvider.TEAMLEADER)
pipedrive_users_table = _provider_link_table(CrmProvider.PIPEDRIVE)
odoo_users_table = _provider_link_table(CrmProvider.ODOO)

PROVIDER_TABLES: dict[CrmProvider, Table] = {
    CrmProvider.TEAMLEADER: teamleader_users_table,
    CrmProvider.PIPEDRIVE: pipedrive_users_table,
    CrmProvider.ODOO: odoo_users_table,
}


# ============================================================================
# SESSION REDEMPTIONS TABLE (single-use magic links)
# ============================================================================
session_redemptions_table = Table(
    "session_redemptions",
    metadata,
    Column("jti", String(64), primary_key=True),
    Column(
        "account_id",
        UUID,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column(
        "redeemed_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    ),
)
