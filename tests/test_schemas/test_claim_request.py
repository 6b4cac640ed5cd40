"""
ClaimRequest validation tests — the two boundary rules. No DB required.
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from claimcalc.schemas.claim import (
    INVALID_INPUT_MESSAGE,
    NEGATIVE_VALUES_MESSAGE,
    ClaimCalculationResponse,
    ClaimRequest,
)
from claimcalc.services.calculation.calculator import AdjustedClaimItem
from claimcalc.services.storage.claim_store import ClaimCalculation


def _payload(**overrides) -> dict:
    payload = {
        "claimItems": [
            {"category": "Medical", "claimedAmount": 900},
            {"category": "Electronics", "claimedAmount": 300},
        ],
        "policyLimit": 1000,
        "excess": 100,
        "coPayRate": 0.2,
    }
    payload.update(overrides)
    return payload


def _messages(exc_info) -> list[str]:
    return [err["msg"] for err in exc_info.value.errors()]


class TestValidRequests:
    def test_camel_case_payload(self):
        request = ClaimRequest.model_validate(_payload())
        assert [i.category for i in request.claim_items] == ["Medical", "Electronics"]
        assert request.claim_items[0].claimed_amount == Decimal("900")
        assert request.co_pay_rate == Decimal("0.2")

    def test_snake_case_payload(self):
        request = ClaimRequest.model_validate(
            {
                "claim_items": [{"category": "Baggage", "claimed_amount": "50"}],
                "policy_limit": "1000",
                "excess": "100",
                "co_pay_rate": "0.1",
            }
        )
        assert request.claim_items[0].claimed_amount == Decimal("50")

    def test_json_decimals_parsed_exactly(self):
        request = ClaimRequest.model_validate_json(
            '{"claimItems": [{"category": "Medical", "claimedAmount": 0.1}],'
            ' "policyLimit": 1000, "excess": 0.3, "coPayRate": 0.2}'
        )
        assert request.claim_items[0].claimed_amount == Decimal("0.1")
        assert request.excess == Decimal("0.3")

    def test_zero_values_allowed(self):
        request = ClaimRequest.model_validate(
            _payload(claimItems=[{"category": "Medical", "claimedAmount": 0}],
                     excess=0, coPayRate=0)
        )
        assert request.excess == Decimal("0")

    def test_co_pay_rate_above_one_allowed(self):
        request = ClaimRequest.model_validate(_payload(coPayRate=1.5))
        assert request.co_pay_rate == Decimal("1.5")

    def test_values_at_stored_precision_allowed(self):
        request = ClaimRequest.model_validate(
            _payload(
                claimItems=[{"category": "Medical", "claimedAmount": "9999999999.99"}],
                policyLimit="1000.50",
                excess="10.01",
                coPayRate="0.1235",
            )
        )
        assert request.claim_items[0].claimed_amount == Decimal("9999999999.99")
        assert request.excess == Decimal("10.01")
        assert request.co_pay_rate == Decimal("0.1235")

    def test_unknown_category_allowed(self):
        request = ClaimRequest.model_validate(
            _payload(claimItems=[{"category": "Jewellery", "claimedAmount": 10}])
        )
        assert request.claim_items[0].category == "Jewellery"


class TestRejectedRequests:
    def test_empty_items(self):
        with pytest.raises(ValidationError) as exc_info:
            ClaimRequest.model_validate(_payload(claimItems=[]))
        assert _messages(exc_info) == [INVALID_INPUT_MESSAGE]

    def test_missing_items(self):
        payload = _payload()
        del payload["claimItems"]
        with pytest.raises(ValidationError) as exc_info:
            ClaimRequest.model_validate(payload)
        assert _messages(exc_info) == [INVALID_INPUT_MESSAGE]

    def test_null_items(self):
        with pytest.raises(ValidationError) as exc_info:
            ClaimRequest.model_validate(_payload(claimItems=None))
        assert _messages(exc_info) == [INVALID_INPUT_MESSAGE]

    @pytest.mark.parametrize("overrides", [
        {"claimItems": [{"category": "Medical", "claimedAmount": -1}]},
        {"claimItems": [
            {"category": "Medical", "claimedAmount": 10},
            {"category": "Baggage", "claimedAmount": -0.01},
        ]},
        {"excess": -100},
        {"coPayRate": -0.2},
    ])
    def test_negative_values(self, overrides):
        with pytest.raises(ValidationError) as exc_info:
            ClaimRequest.model_validate(_payload(**overrides))
        assert _messages(exc_info) == [NEGATIVE_VALUES_MESSAGE]

    def test_empty_items_reported_before_negative_values(self):
        with pytest.raises(ValidationError) as exc_info:
            ClaimRequest.model_validate(_payload(claimItems=[], excess=-1))
        assert _messages(exc_info) == [INVALID_INPUT_MESSAGE]

    @pytest.mark.parametrize("overrides,field", [
        ({"excess": "10.005"}, "excess"),
        ({"policyLimit": "1000.001"}, "policyLimit"),
        ({"claimItems": [{"category": "Medical", "claimedAmount": "100.005"}]}, "claimedAmount"),
        ({"claimItems": [{"category": "Medical", "claimedAmount": 10_000_000_000}]}, "claimedAmount"),
        ({"policyLimit": 10_000_000_000}, "policyLimit"),
        ({"coPayRate": "0.12345"}, "coPayRate"),
        ({"coPayRate": 100}, "coPayRate"),
    ])
    def test_values_beyond_stored_precision(self, overrides, field):
        with pytest.raises(ValidationError) as exc_info:
            ClaimRequest.model_validate(_payload(**overrides))
        assert [err["loc"][-1] for err in exc_info.value.errors()] == [field]

    def test_non_numeric_amount(self):
        with pytest.raises(ValidationError):
            ClaimRequest.model_validate(
                _payload(claimItems=[{"category": "Medical", "claimedAmount": "lots"}])
            )


class TestCalculationResponse:
    def test_built_from_stored_calculation(self):
        from datetime import datetime, timezone

        calc = ClaimCalculation(
            id=7,
            policy_limit=Decimal("1000"),
            excess=Decimal("100"),
            co_pay_rate=Decimal("0.2"),
            subtotal=Decimal("1050"),
            excess_deduction=Decimal("100"),
            amount_after_excess=Decimal("950"),
            co_pay_deduction=Decimal("190"),
            final_payout=Decimal("760"),
            created_at=datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc),
            claim_items=(
                AdjustedClaimItem("Medical", Decimal("900"), Decimal("750"), Decimal("750")),
            ),
        )
        body = ClaimCalculationResponse.model_validate(calc).model_dump(by_alias=True)

        assert body["id"] == 7
        assert body["finalPayout"] == Decimal("760")
        assert body["claimItems"] == [
            {
                "category": "Medical",
                "claimedAmount": Decimal("900"),
                "adjustedAmount": Decimal("750"),
                "innerLimit": Decimal("750"),
            }
        ]
