"""add is_chirpy_red to users

Revision ID: e2a7b5d0c613
Revises: 5c8e0f3a2d94
Create Date: 2026-10-12 18:05:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "e2a7b5d0c613"
down_revision: Union[str, Sequence[str], None] = "5c8e0f3a2d94"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if "users" not in inspector.get_table_names():
        return

    column_names = {column["name"] for column in inspector.get_columns("users")}
    if "is_chirpy_red" not in column_names:
        op.add_column(
            "users",
            sa.Column("is_chirpy_red", sa.Boolean(), nullable=False, server_default=sa.false()),
        )


def downgrade() -> None:
    """Downgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    if "users" not in inspector.get_table_names():
        return

    column_names = {column["name"] for column in inspector.get_columns("users")}
    if "is_chirpy_red" in column_names:
        op.drop_column("users", "is_chirpy_red")
