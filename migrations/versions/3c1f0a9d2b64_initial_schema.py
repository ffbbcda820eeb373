"""initial_schema

Create the schema for EmercoinID login:
- Accounts (local user accounts)
- Identity bindings (certificate serial -> account, one per serial)

Revision ID: 3c1f0a9d2b64
Revises:
Create Date: 2026-10-17 10:12:44.518204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1f0a9d2b64"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE account_status AS ENUM ('active', 'blocked');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # ACCOUNTS table
    # ========================================================================
    op.create_table(
        "accounts",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("username", sa.String(60), nullable=False),
        sa.Column("email", sa.String(254), nullable=False),
        sa.Column(
            "status",
            postgresql.ENUM(
                "active", "blocked", name="account_status", create_type=False
            ),
            nullable=False,
            server_default="blocked",
        ),
        sa.Column(
            "roles",
            postgresql.ARRAY(sa.String(64)),
            nullable=False,
            server_default="{authenticated}",
        ),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("is_superuser", sa.Boolean(), nullable=False, server_default="false"),
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
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_accounts_username"),
    )
    op.create_index(
        "uq_accounts_email_lower",
        "accounts",
        [sa.text("lower(email)")],
        unique=True,
    )

    # ========================================================================
    # IDENTITY_BINDINGS table
    # ========================================================================
    op.create_table(
        "identity_bindings",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("provider_user_id", sa.String(255), nullable=False),  # Serial
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("provider_user_id", name="uq_identity_bindings_provider_user_id"),
    )
    op.create_index(
        "idx_identity_bindings_account_id", "identity_bindings", ["account_id"]
    )

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

    op.execute("""
        CREATE TRIGGER update_accounts_updated_at
        BEFORE UPDATE ON accounts
        FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TRIGGER IF EXISTS update_accounts_updated_at ON accounts")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    op.drop_table("identity_bindings")
    op.drop_table("accounts")

    op.execute("DROP TYPE IF EXISTS account_status")
