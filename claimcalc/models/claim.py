"""
Claim calculation entities: ClaimCalculationRecord (header) and
ClaimCalculationItemRecord (one row per adjusted claim item).

Both tables are written once, inside a single transaction, by
ClaimStore.save(). Nothing in the application updates or deletes them.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from claimcalc.models.base import Base

MONEY = Numeric(12, 2)
RATE = Numeric(6, 4)


class ClaimCalculationRecord(Base):
    """
    Header row for one completed payout calculation.

    Holds the request scalars (policy_limit, excess, co_pay_rate) and the
    breakdown scalars. The integer id is the calculation identity returned
    to callers; it is assigned by the database and never reused.
    """

    __tablename__ = "claim_calculations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # ── Request ──────────────────────────────────────────────────────────────
    policy_limit: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    excess: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    co_pay_rate: Mapped[Decimal] = mapped_column(RATE, nullable=False)

    # ── Breakdown ────────────────────────────────────────────────────────────
    subtotal: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    excess_deduction: Mapped[Decimal] = mapped_column(
        MONEY, nullable=False, comment="Raw excess as requested, not capped by subtotal"
    )
    amount_after_excess: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    co_pay_deduction: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    final_payout: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    # Server-authoritative; never set by application code
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    items: Mapped[list["ClaimCalculationItemRecord"]] = relationship(
        "ClaimCalculationItemRecord",
        back_populates="calculation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ClaimCalculationItemRecord.line_number",
    )

    def __repr__(self) -> str:
        return (
            f"<ClaimCalculationRecord id={self.id} "
            f"final_payout={self.final_payout}>"
        )


class ClaimCalculationItemRecord(Base):
    """A single adjusted claim line, owned by its calculation header."""

    __tablename__ = "claim_calculation_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    claim_calculation_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("claim_calculations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Position in the submitted request (1-based); preserves input order
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)

    category: Mapped[str] = mapped_column(String(64), nullable=False)
    claimed_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    adjusted_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    inner_limit: Mapped[Decimal] = mapped_column(MONEY, nullable=False)

    calculation: Mapped["ClaimCalculationRecord"] = relationship(
        "ClaimCalculationRecord", back_populates="items"
    )

    def __repr__(self) -> str:
        return (
            f"<ClaimCalculationItemRecord line={self.line_number} "
            f"category={self.category!r} adjusted={self.adjusted_amount}>"
        )
