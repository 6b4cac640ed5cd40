"""
Payout Calculation Engine — deterministic, fully testable.

For a validated ClaimRequest:
  1. Each item is capped at its category's inner limit (0 if the category
     is not covered). Items are adjusted one by one against the flat limit;
     items sharing a category are NOT pooled.
  2. Subtotal = sum of adjusted amounts (adjusted amounts are not rounded,
     so an adjusted amount never exceeds what was claimed)
  3. Amount after excess = max(0, subtotal - excess)
  4. Co-pay deduction = amount after excess × co-pay rate
  5. Final payout = min(policy limit, amount after excess - co-pay deduction)

There is no floor on step 5: a co-pay rate above 1 yields a negative payout.
The recorded excess deduction is the requested excess, not the amount
actually absorbed by the subtotal.

Design principle: pure function, no DB access, no shared state. Request
validation happens at the API boundary (claimcalc.schemas.claim); this
module assumes it has already run.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional

from claimcalc.schemas.claim import ClaimRequest
from claimcalc.services.calculation.limits import (
    DEFAULT_INNER_LIMITS,
    UNCOVERED_LIMIT,
    freeze_limits,
)

CENT = Decimal("0.01")
ZERO = Decimal("0")


def round_currency(amount: Decimal) -> Decimal:
    """Round to 2 decimal places for currency."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class AdjustedClaimItem:
    """One claimed item after its category's inner limit has been applied."""

    category: str
    claimed_amount: Decimal
    adjusted_amount: Decimal
    inner_limit: Decimal


@dataclass(frozen=True)
class ClaimBreakdown:
    subtotal: Decimal
    excess_deduction: Decimal
    amount_after_excess: Decimal
    co_pay_deduction: Decimal
    final_payout: Decimal


class ClaimCalculator:
    """
    Applies inner limits, excess, co-pay and the policy cap to a claim.

    Usage:
        calculator = ClaimCalculator()
        items, breakdown = calculator.calculate(request)

    The limit table is copied and frozen at construction; pass
    `inner_limits` to run the same algorithm against a different table
    (categories missing from it are uncovered).
    """

    def __init__(self, inner_limits: Optional[Mapping[str, Decimal]] = None):
        self.inner_limits = freeze_limits(
            inner_limits if inner_limits is not None else DEFAULT_INNER_LIMITS
        )

    def inner_limit_for(self, category: str) -> Decimal:
        return self.inner_limits.get(category, UNCOVERED_LIMIT)

    def calculate(
        self, request: ClaimRequest
    ) -> tuple[list[AdjustedClaimItem], ClaimBreakdown]:
        adjusted_items: list[AdjustedClaimItem] = []
        subtotal = ZERO

        # ── Inner limits ─────────────────────────────────────────────────────
        for item in request.claim_items:
            limit = self.inner_limit_for(item.category)
            adjusted = min(item.claimed_amount, limit)
            subtotal += adjusted
            adjusted_items.append(
                AdjustedClaimItem(
                    category=item.category,
                    claimed_amount=item.claimed_amount,
                    adjusted_amount=adjusted,
                    inner_limit=limit,
                )
            )

        # ── Excess, co-pay, policy cap (full precision until the end) ───────
        after_excess = max(ZERO, subtotal - request.excess)
        co_pay = after_excess * request.co_pay_rate
        final = min(request.policy_limit, after_excess - co_pay)

        breakdown = ClaimBreakdown(
            subtotal=subtotal,
            excess_deduction=request.excess,
            amount_after_excess=round_currency(after_excess),
            co_pay_deduction=round_currency(co_pay),
            final_payout=round_currency(final),
        )
        return adjusted_items, breakdown


_default_calculator = ClaimCalculator()


def calculate(request: ClaimRequest) -> tuple[list[AdjustedClaimItem], ClaimBreakdown]:
    """Run the calculation with the built-in limit table."""
    return _default_calculator.calculate(request)
