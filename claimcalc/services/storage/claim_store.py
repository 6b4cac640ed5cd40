"""
ClaimStore — the only code that reads or writes claim calculation rows.

save():
  Writes the header row and every item row in one transaction. The header
  is flushed first so its generated id can be used as the items' foreign
  key; the commit happens when the transaction scope exits cleanly. Any
  error inside the scope rolls the whole thing back, so a header without
  items (or items without a header) is never visible.

list_recent():
  Two statements, no N+1:
    1. the newest `limit` headers (created_at DESC, id DESC)
    2. every item belonging to those headers
  Items are attached to their header by foreign key in memory. The result
  is a list of immutable ClaimCalculation values, detached from any session.

Every call opens and closes its own session. Storage failures are logged
and re-raised as CalculationSaveError / CalculationReadError — never retried.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from claimcalc.models.claim import ClaimCalculationItemRecord, ClaimCalculationRecord
from claimcalc.schemas.claim import ClaimRequest
from claimcalc.services.calculation.calculator import AdjustedClaimItem, ClaimBreakdown
from claimcalc.services.storage.errors import CalculationReadError, CalculationSaveError

logger = logging.getLogger(__name__)

DEFAULT_RECENT_LIMIT = 100

# Infrastructure failures that surface as PersistenceError. ConnectionError
# covers access token acquisition failures raised while connecting.
STORAGE_ERRORS = (SQLAlchemyError, ConnectionError)


@dataclass(frozen=True)
class ClaimCalculation:
    """A persisted calculation with its items, in submission order."""

    id: int
    policy_limit: Decimal
    excess: Decimal
    co_pay_rate: Decimal
    subtotal: Decimal
    excess_deduction: Decimal
    amount_after_excess: Decimal
    co_pay_deduction: Decimal
    final_payout: Decimal
    created_at: datetime
    claim_items: tuple[AdjustedClaimItem, ...] = ()


class ClaimStore:
    """
    Usage:
        store = ClaimStore(provider.session_factory())
        calc_id = store.save(request, items, breakdown)
        recent = store.list_recent()
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self.session_factory = session_factory

    def save(
        self,
        request: ClaimRequest,
        adjusted_items: list[AdjustedClaimItem],
        breakdown: ClaimBreakdown,
    ) -> int:
        """Persist one calculation atomically and return its new id."""
        try:
            with self.session_factory.begin() as session:
                header = ClaimCalculationRecord(
                    policy_limit=request.policy_limit,
                    excess=request.excess,
                    co_pay_rate=request.co_pay_rate,
                    subtotal=breakdown.subtotal,
                    excess_deduction=breakdown.excess_deduction,
                    amount_after_excess=breakdown.amount_after_excess,
                    co_pay_deduction=breakdown.co_pay_deduction,
                    final_payout=breakdown.final_payout,
                )
                session.add(header)
                session.flush()  # assigns header.id inside the open transaction
                calc_id = header.id

                session.add_all(
                    ClaimCalculationItemRecord(
                        claim_calculation_id=calc_id,
                        line_number=line_number,
                        category=item.category,
                        claimed_amount=item.claimed_amount,
                        adjusted_amount=item.adjusted_amount,
                        inner_limit=item.inner_limit,
                    )
                    for line_number, item in enumerate(adjusted_items, start=1)
                )
                session.flush()
        except STORAGE_ERRORS as exc:
            logger.exception("Failed to save claim calculation")
            raise CalculationSaveError("Could not persist claim calculation", cause=exc) from exc

        logger.info(
            "Saved claim calculation %s (%d items, final payout %s)",
            calc_id,
            len(adjusted_items),
            breakdown.final_payout,
        )
        return calc_id

    def list_recent(self, limit: int = DEFAULT_RECENT_LIMIT) -> list[ClaimCalculation]:
        """Return up to `limit` calculations, newest first, with their items."""
        try:
            with self.session_factory() as session:
                headers = session.scalars(
                    select(ClaimCalculationRecord)
                    .order_by(
                        ClaimCalculationRecord.created_at.desc(),
                        ClaimCalculationRecord.id.desc(),
                    )
                    .limit(limit)
                ).all()
                if not headers:
                    return []

                items_by_calc: dict[int, list[AdjustedClaimItem]] = {
                    header.id: [] for header in headers
                }
                item_rows = session.scalars(
                    select(ClaimCalculationItemRecord)
                    .where(ClaimCalculationItemRecord.claim_calculation_id.in_(list(items_by_calc)))
                    .order_by(
                        ClaimCalculationItemRecord.claim_calculation_id,
                        ClaimCalculationItemRecord.line_number,
                    )
                ).all()
                for row in item_rows:
                    items_by_calc[row.claim_calculation_id].append(
                        AdjustedClaimItem(
                            category=row.category,
                            claimed_amount=row.claimed_amount,
                            adjusted_amount=row.adjusted_amount,
                            inner_limit=row.inner_limit,
                        )
                    )

                return [
                    _to_calculation(header, items_by_calc[header.id]) for header in headers
                ]
        except STORAGE_ERRORS as exc:
            logger.exception("Failed to read recent claim calculations")
            raise CalculationReadError("Could not read claim calculations", cause=exc) from exc


def _to_calculation(
    header: ClaimCalculationRecord, items: list[AdjustedClaimItem]
) -> ClaimCalculation:
    return ClaimCalculation(
        id=header.id,
        policy_limit=header.policy_limit,
        excess=header.excess,
        co_pay_rate=header.co_pay_rate,
        subtotal=header.subtotal,
        excess_deduction=header.excess_deduction,
        amount_after_excess=header.amount_after_excess,
        co_pay_deduction=header.co_pay_deduction,
        final_payout=header.final_payout,
        created_at=header.created_at,
        claim_items=tuple(items),
    )
