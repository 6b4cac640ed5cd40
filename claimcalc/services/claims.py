"""
Claim calculation service — composes the calculator and the store.

  process_and_save(request) → run the calculation, persist it, return the id
  get_recent_claims()       → the newest calculations with their items

The request must already be validated (ClaimRequest does this on parse).
"""

import logging

from claimcalc.schemas.claim import ClaimRequest
from claimcalc.services.calculation.calculator import ClaimCalculator
from claimcalc.services.calculation.limits import build_inner_limits
from claimcalc.services.storage.claim_store import (
    DEFAULT_RECENT_LIMIT,
    ClaimCalculation,
    ClaimStore,
)

logger = logging.getLogger(__name__)


class ClaimCalculationService:
    def __init__(
        self,
        store: ClaimStore,
        calculator: ClaimCalculator | None = None,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
    ):
        self.store = store
        self.calculator = calculator or ClaimCalculator()
        self.recent_limit = recent_limit

    def process_and_save(self, request: ClaimRequest) -> int:
        adjusted_items, breakdown = self.calculator.calculate(request)
        logger.debug(
            "Calculated claim: %d items, subtotal %s, final payout %s",
            len(adjusted_items),
            breakdown.subtotal,
            breakdown.final_payout,
        )
        return self.store.save(request, adjusted_items, breakdown)

    def get_recent_claims(self) -> list[ClaimCalculation]:
        return self.store.list_recent(self.recent_limit)


# ── FastAPI dependency ──────────────────────────────────────────────────────
def get_claim_service() -> ClaimCalculationService:
    """Build the service from the configured connection provider and settings."""
    from claimcalc.services.storage.connection import get_connection_provider
    from claimcalc.settings import settings

    provider = get_connection_provider()
    return ClaimCalculationService(
        ClaimStore(provider.session_factory()),
        ClaimCalculator(build_inner_limits(settings.inner_limit_overrides)),
        recent_limit=settings.recent_claims_limit,
    )
