"""create chirps table

Revision ID: 9b4d2e61a0c7
Revises: 3f1a9c2e7b10
Create Date: 2026-10-05 15:20:11.904512

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '9b4d2e61a0c7'
down_revision: Union[str, Sequence[str], None] = '3f1a9c2e7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if "chirps" in inspector.get_table_names():
        return

    op.create_table(
        "chirps",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("body", sa.String(length=140), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_chirps_user_id", "chirps", ["user_id"], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if "chirps" not in inspector.get_table_names():
        return

    index_names = {idx["name"] for idx in inspector.get_indexes("chirps")}
    if "ix_chirps_user_id" in index_names:
        op.drop_index("ix_chirps_user_id", table_name="chirps")
    op.drop_table("chirps")
