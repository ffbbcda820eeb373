"""SQLAlchemy table definitions for EmercoinID login.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    func,
)
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# ACCOUNTS TABLE
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("username", String(60), nullable=False, unique=True),
    Column("email", String(254), nullable=False),
    Column(
        "status",
        postgresql.ENUM("active", "blocked", name="account_status", create_type=False),
        nullable=False,
        server_default="blocked",
    ),
    Column(
        "roles",
        postgresql.ARRAY(String(64)),
        nullable=False,
        server_default="{authenticated}",
    ),
    Column("password_hash", Text, nullable=False),
    Column("is_superuser", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# Email addresses are unique regardless of case
Index("uq_accounts_email_lower", func.lower(accounts_table.c.email), unique=True)

# ============================================================================
# IDENTITY BINDINGS TABLE (certificate serial -> account)
# ============================================================================
identity_bindings_table = Table(
    "identity_bindings",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("provider_user_id", String(255), nullable=False, unique=True),
    Column(
        "account_id",
        UUID,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_identity_bindings_account_id", identity_bindings_table.c.account_id)
