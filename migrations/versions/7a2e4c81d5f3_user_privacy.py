"""user privacy flag

Revision ID: 7a2e4c81d5f3
Revises: 3c1f0a9d2b7e
Create Date: 2026-10-19 15:40:02.906114

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "7a2e4c81d5f3"
down_revision: Union[str, Sequence[str], None] = "3c1f0a9d2b7e"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("user_account") as batch_op:
        batch_op.add_column(
            sa.Column(
                "hide_full_name",
                sa.Boolean(),
                nullable=False,
                server_default=sa.false(),
            )
        )


def downgrade() -> None:
    with op.batch_alter_table("user_account") as batch_op:
        batch_op.drop_column("hide_full_name")
