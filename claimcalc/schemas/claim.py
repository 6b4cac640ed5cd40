"""
Claim calculation schemas — request and response shapes for the API.

ClaimRequest is the validation boundary: a request that parses is one the
calculator can run on. Two rules are enforced, in this order:
  1. claimItems must be present and non-empty
  2. no claimed amount, excess or co-pay rate may be negative
Amounts are limited to 2 decimal places (12 digits) and the co-pay rate to
4 decimal places (6 digits), matching the storage columns.
Co-pay rates above 1 and unknown categories are accepted as-is.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, model_validator
from pydantic_core import PydanticCustomError

from claimcalc.schemas.common import CamelSchema

INVALID_INPUT_MESSAGE = "Invalid input."
NEGATIVE_VALUES_MESSAGE = "Negative values are not allowed."

# Same precision as the claim_calculations / claim_calculation_items columns,
# so what is calculated is exactly what is stored.
MONEY_FIELD = {"max_digits": 12, "decimal_places": 2}
RATE_FIELD = {"max_digits": 6, "decimal_places": 4}


# ── Request schemas ──────────────────────────────────────────────────────────


class ClaimItemIn(CamelSchema):
    category: str
    claimed_amount: Decimal = Field(..., **MONEY_FIELD)


class ClaimRequest(CamelSchema):
    """Payload submitted to POST /claim-calc."""

    claim_items: Optional[list[ClaimItemIn]] = None
    policy_limit: Decimal = Field(..., **MONEY_FIELD)
    excess: Decimal = Field(..., **MONEY_FIELD)
    co_pay_rate: Decimal = Field(..., **RATE_FIELD)

    @model_validator(mode="after")
    def check_claim(self) -> "ClaimRequest":
        if not self.claim_items:
            raise PydanticCustomError("invalid_input", INVALID_INPUT_MESSAGE)
        if (
            any(item.claimed_amount < 0 for item in self.claim_items)
            or self.excess < 0
            or self.co_pay_rate < 0
        ):
            raise PydanticCustomError("negative_value", NEGATIVE_VALUES_MESSAGE)
        return self


# ── Response schemas ─────────────────────────────────────────────────────────


class ClaimSubmitResponse(CamelSchema):
    """Returned after a calculation has been committed."""

    id: int
    message: str


class ClaimItemResponse(CamelSchema):
    category: str
    claimed_amount: Decimal
    adjusted_amount: Decimal
    inner_limit: Decimal


class ClaimCalculationResponse(CamelSchema):
    """One persisted calculation with its line items, as listed by GET /claim-calc."""

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
    claim_items: list[ClaimItemResponse] = []
