"""Initial schema — claim calculations and their items

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ── claim_calculations ────────────────────────────────────────────────────
    op.create_table(
        "claim_calculations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("policy_limit", sa.Numeric(12, 2), nullable=False),
        sa.Column("excess", sa.Numeric(12, 2), nullable=False),
        sa.Column("co_pay_rate", sa.Numeric(6, 4), nullable=False),
        sa.Column("subtotal", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "excess_deduction",
            sa.Numeric(12, 2),
            nullable=False,
            comment="Raw excess as requested, not capped by subtotal",
        ),
        sa.Column("amount_after_excess", sa.Numeric(12, 2), nullable=False),
        sa.Column("co_pay_deduction", sa.Numeric(12, 2), nullable=False),
        sa.Column("final_payout", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_claim_calculations_created_at", "claim_calculations", ["created_at"]
    )

    # ── claim_calculation_items ───────────────────────────────────────────────
    op.create_table(
        "claim_calculation_items",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "claim_calculation_id",
            sa.Integer,
            sa.ForeignKey("claim_calculations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("line_number", sa.Integer, nullable=False),
        sa.Column("category", sa.String(64), nullable=False),
        sa.Column("claimed_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("adjusted_amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("inner_limit", sa.Numeric(12, 2), nullable=False),
    )
    op.create_index(
        "ix_claim_calculation_items_claim_calculation_id",
        "claim_calculation_items",
        ["claim_calculation_id"],
    )


def downgrade() -> None:
    op.drop_index(
        "ix_claim_calculation_items_claim_calculation_id",
        table_name="claim_calculation_items",
    )
    op.drop_table("claim_calculation_items")
    op.drop_index("ix_claim_calculations_created_at", table_name="claim_calculations")
    op.drop_table("claim_calculations")
