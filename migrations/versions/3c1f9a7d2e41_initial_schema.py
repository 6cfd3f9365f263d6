"""initial_schema

Create the schema for VoiceLink:
- Accounts (provider-agnostic authentication)
- Provider link tables, one per CRM (Teamleader, Pipedrive, Odoo), holding the
  WhatsApp verification state, the pending OTP challenge and invitations
- Session redemptions (single-use magic links)

Revision ID: 3c1f9a7d2e41
Revises:
Create Date: 2025-11-04 10:12:45.318204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d2e41"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PROVIDER_TABLES = ["teamleader_users", "pipedrive_users", "odoo_users"]


def _create_provider_table(name: str) -> None:
    op.create_table(
        name,
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column("external_id", sa.String(255), nullable=False),  # CRM user ID
        sa.Column(
            "profile",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        # WhatsApp verification
        sa.Column("whatsapp_number", sa.String(32), nullable=True),
        sa.Column(
            "whatsapp_status",
            sa.String(16),
            nullable=False,
            server_default=sa.text("'not_set'"),
        ),  # 'not_set', 'pending', 'active'
        sa.Column("whatsapp_otp_code", sa.String(6), nullable=True),
        sa.Column("whatsapp_otp_phone", sa.String(32), nullable=True),
        sa.Column(
            "whatsapp_otp_expires_at", sa.TIMESTAMP(timezone=True), nullable=True
        ),
        # Invitation
        sa.Column("invitation_token", sa.String(255), nullable=True),
        sa.Column(
            "invitation_token_expires_at", sa.TIMESTAMP(timezone=True), nullable=True
        ),
        sa.Column("invitation_status", sa.String(16), nullable=True),
        sa.Column("invitation_email", sa.String(255), nullable=True),
        sa.Column("invitation_phone", sa.String(32), nullable=True),
        sa.Column("invited_by", sa.UUID(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["invited_by"], ["accounts.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("invitation_token", name=f"{name}_invitation_token_key"),
        sa.CheckConstraint(
            "whatsapp_status IN ('not_set', 'pending', 'active')",
            name=f"ck_{name}_whatsapp_status",
        ),
    )

    # At most one active link per CRM user
    op.create_index(
        f"uq_{name}_external_id_active",
        name,
        ["external_id"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
    )
    op.create_index(f"idx_{name}_account_id", name, ["account_id"])

    op.execute(f"""
        CREATE TRIGGER update_{name}_updated_at
        BEFORE UPDATE ON {name}
        FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
    """)


def upgrade() -> None:
    """Upgrade schema."""
    # Enable required extensions
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # Trigger function to update updated_at timestamp
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """)

    # ========================================================================
    # ACCOUNTS table (provider-agnostic)
    # ========================================================================
    op.create_table(
        "accounts",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="accounts_email_key"),
    )

    # ========================================================================
    # PROVIDER LINK tables (one per CRM)
    # ========================================================================
    for name in PROVIDER_TABLES:
        _create_provider_table(name)

    # ========================================================================
    # SESSION_REDEMPTIONS table (single-use magic links)
    # ========================================================================
    op.create_table(
        "session_redemptions",
        sa.Column("jti", sa.String(64), nullable=False),
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column(
            "redeemed_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.PrimaryKeyConstraint("jti"),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
    )
    op.create_index(
        "idx_session_redemptions_expires_at", "session_redemptions", ["expires_at"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("session_redemptions")

    for name in reversed(PROVIDER_TABLES):
        op.execute(f"DROP TRIGGER IF EXISTS update_{name}_updated_at ON {name}")
        op.drop_table(name)

    op.drop_table("accounts")

    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")
