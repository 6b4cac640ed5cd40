"""
Claim calculation API routes.

  POST /claim-calc  → validate, calculate, persist; returns the new id
  GET  /claim-calc  → the most recent calculations with their line items

Validation failures (400) and persistence failures (503) are turned into
ErrorResponse bodies by the handlers registered in claimcalc.main.
"""

from fastapi import APIRouter, Depends

from claimcalc.schemas.claim import (
    ClaimCalculationResponse,
    ClaimRequest,
    ClaimSubmitResponse,
)
from claimcalc.services.claims import ClaimCalculationService, get_claim_service

router = APIRouter(prefix="/claim-calc", tags=["claims"])


@router.post("", response_model=ClaimSubmitResponse)
def submit_claim(
    payload: ClaimRequest,
    service: ClaimCalculationService = Depends(get_claim_service),
) -> ClaimSubmitResponse:
    calc_id = service.process_and_save(payload)
    return ClaimSubmitResponse(id=calc_id, message=f"Calculation saved. Id: {calc_id}")


@router.get("", response_model=list[ClaimCalculationResponse])
def list_recent_claims(
    service: ClaimCalculationService = Depends(get_claim_service),
) -> list[ClaimCalculationResponse]:
    """Newest first; capped at RECENT_CLAIMS_LIMIT (default 100)."""
    return [
        ClaimCalculationResponse.model_validate(calc)
        for calc in service.get_recent_claims()
    ]
