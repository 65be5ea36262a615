"""create refresh tokens table

Revision ID: 5c8e0f3a2d94
Revises: 9b4d2e61a0c7
Create Date: 2026-10-08 09:47:53.660318

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c8e0f3a2d94'
down_revision: Union[str, Sequence[str], None] = '9b4d2e61a0c7'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if "refresh_tokens" in inspector.get_table_names():
        return

    op.create_table(
        "refresh_tokens",
        sa.Column("token", sa.String(length=64), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("token"),
    )
    op.create_index("ix_refresh_tokens_user_id", "refresh_tokens", ["user_id"], unique=False)
    op.create_index("ix_refresh_tokens_expires_at", "refresh_tokens", ["expires_at"], unique=False)
    op.create_index("ix_refresh_tokens_revoked_at", "refresh_tokens", ["revoked_at"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if "refresh_tokens" not in inspector.get_table_names():
        return

    index_names = {idx["name"] for idx in inspector.get_indexes("refresh_tokens")}
    if "ix_refresh_tokens_revoked_at" in index_names:
        op.drop_index("ix_refresh_tokens_revoked_at", table_name="refresh_tokens")
    if "ix_refresh_tokens_expires_at" in index_names:
        op.drop_index("ix_refresh_tokens_expires_at", table_name="refresh_tokens")
    if "ix_refresh_tokens_user_id" in index_names:
        op.drop_index("ix_refresh_tokens_user_id", table_name="refresh_tokens")
    op.drop_table("refresh_tokens")
