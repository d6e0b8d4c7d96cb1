"""SQLAlchemy table definitions for the expense tracker.

These table definitions are used with SQLAlchemy Core.
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
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE (Provider-agnostic)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column(
        "id", UUID, primary_key=True, server_default=text("gen_random_uuid()")
    ),
    Column("email", String(255), nullable=False),  # Lower-cased; may be a placeholder
    Column("name", String(255), nullable=False),
    Column("avatar_url", Text, nullable=True),
    Column(
        "created_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    ),
    UniqueConstraint("email", name="uq_users_email"),
)

# ============================================================================
# PROVIDER LINKS TABLE (Multi-provider authentication)
# ============================================================================
provider_links_table = Table(
    "provider_links",
    metadata,
    Column(
        "id", UUID, primary_key=True, server_default=text("gen_random_uuid()")
    ),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("provider", String(50), nullable=False),  # 'google', 'line'
    Column("subject_id", String(255), nullable=False),  # Provider "sub"
    Column("email", String(255), nullable=True),  # As reported at link time
    Column("name", String(255), nullable=True),
    Column("avatar_url", Text, nullable=True),
    Column(
        "linked_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    ),
    UniqueConstraint("provider", "subject_id", name="uq_provider_links_subject"),
    UniqueConstraint("user_id", "provider", name="uq_provider_links_user_provider"),
)

Index("idx_provider_links_user_id", provider_links_table.c.user_id)

# ============================================================================
# SEEDED EXPENSE-MANAGEMENT TABLES
# Owned by expense management; identity only writes the defaults.
# ============================================================================
categories_table = Table(
    "categories",
    metadata,
    Column(
        "id", UUID, primary_key=True, server_default=text("gen_random_uuid()")
    ),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("name", String(100), nullable=False),
    Column(
        "created_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    ),
    UniqueConstraint("user_id", "name", name="uq_categories_user_name"),
)

user_prompts_table = Table(
    "user_prompts",
    metadata,
    Column(
        "id", UUID, primary_key=True, server_default=text("gen_random_uuid()")
    ),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("prompt", Text, nullable=False),
    Column("is_default", Boolean, nullable=False, server_default=text("false")),
    Column(
        "created_at",
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("NOW()"),
    ),
)

Index("idx_user_prompts_user_id", user_prompts_table.c.user_id)
