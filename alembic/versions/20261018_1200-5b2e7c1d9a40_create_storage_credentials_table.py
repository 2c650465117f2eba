"""create_storage_credentials_table

Revision ID: 5b2e7c1d9a40
Revises:
Create Date: 2026-10-18 12:00:00.000000+00:00

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "5b2e7c1d9a40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create storage_credentials table."""
    op.create_table(
        "storage_credentials",
        # Primary key and timestamps from BaseMutableModel
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        # Ownership and provider
        sa.Column(
            "owner_user_id",
            sa.Uuid(),
            nullable=False,
            comment="User who owns this credential",
        ),
        sa.Column(
            "provider_slug",
            sa.String(length=50),
            nullable=False,
            comment="Provider registry key",
        ),
        # Token material (ciphertext only)
        sa.Column("access_token_cipher", sa.Text(), nullable=False),
        sa.Column("refresh_token_cipher", sa.Text(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        # State
        sa.Column(
            "disabled",
            sa.Boolean(),
            server_default=sa.false(),
            nullable=False,
        ),
        sa.Column(
            "health_status",
            sa.String(length=20),
            server_default="healthy",
            nullable=False,
        ),
        # Account profile
        sa.Column(
            "external_account_id",
            sa.String(length=255),
            server_default="",
            nullable=False,
        ),
        sa.Column(
            "display_name", sa.String(length=255), server_default="", nullable=False
        ),
        sa.Column("email", sa.String(length=255), server_default="", nullable=False),
        sa.Column("picture_url", sa.Text(), nullable=True),
        sa.Column("quota_used_bytes", sa.BigInteger(), nullable=True),
        sa.Column("quota_total_bytes", sa.BigInteger(), nullable=True),
        # Soft delete
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_storage_credentials_owner_user_id"),
        "storage_credentials",
        ["owner_user_id"],
        unique=False,
    )
    op.create_index(
        "idx_storage_credentials_owner_live",
        "storage_credentials",
        ["owner_user_id", "deleted_at"],
        unique=False,
    )


def downgrade() -> None:
    """Drop storage_credentials table."""
    op.drop_index("idx_storage_credentials_owner_live", table_name="storage_credentials")
    op.drop_index(
        op.f("ix_storage_credentials_owner_user_id"), table_name="storage_credentials"
    )
    op.drop_table("storage_credentials")
