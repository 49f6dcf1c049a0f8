"""create weights table

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00.000000

One row per cat per calendar day; the unique constraint
(subject, date) is what makes resubmission an update.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "weights",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("subject", sa.String(128), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.UniqueConstraint("subject", "date", name="uq_weights_subject_date"),
    )
    op.create_index("ix_weights_subject", "weights", ["subject"])
    op.create_index("ix_weights_date", "weights", ["date"])


def downgrade() -> None:
    op.drop_index("ix_weights_date", table_name="weights")
    op.drop_index("ix_weights_subject", table_name="weights")
    op.drop_table("weights")
