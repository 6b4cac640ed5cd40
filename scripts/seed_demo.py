"""
Demo seed script — submit a handful of realistic claim calculations so the
history endpoint has something to show.

Uses the standard policy terms of the calculator front end:
    policy limit 1000, excess 100, co-pay 20%

Usage:
    python scripts/seed_demo.py
    python scripts/seed_demo.py --create-tables   # local SQLite / scratch DBs

Not idempotent — every run appends new calculations.
"""

import argparse
import os
import sys
from decimal import Decimal

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from claimcalc.models.base import Base
from claimcalc.schemas.claim import ClaimItemIn, ClaimRequest
from claimcalc.services.claims import get_claim_service
from claimcalc.services.storage.connection import get_connection_provider
from claimcalc.services.storage.errors import PersistenceError

# ── Demo data constants ────────────────────────────────────────────────────────

POLICY_LIMIT = Decimal("1000")
EXCESS = Decimal("100")
CO_PAY_RATE = Decimal("0.20")

# (label, [(category, claimed_amount), ...])
DEMO_CLAIMS = [
    (
        "Hospital visit + damaged laptop",
        [("Medical", Decimal("900.00")), ("Electronics", Decimal("300.00"))],
    ),
    (
        "Delayed suitcase",
        [("Baggage", Decimal("50.00"))],
    ),
    (
        "Stolen bag with phone and camera",
        [
            ("Baggage", Decimal("650.00")),
            ("Electronics", Decimal("420.00")),
            ("Electronics", Decimal("380.00")),
        ],
    ),
    (
        "Emergency dental treatment",
        [("Medical", Decimal("480.00"))],
    ),
]


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed demo claim calculations")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="create tables directly instead of relying on alembic upgrade",
    )
    args = parser.parse_args()

    print("\n=== Claim Payout Calculator — Demo Seed ===\n")

    if args.create_tables:
        Base.metadata.create_all(bind=get_connection_provider().engine)
        print("✓ Tables created")

    service = get_claim_service()
    for label, items in DEMO_CLAIMS:
        request = ClaimRequest(
            claim_items=[
                ClaimItemIn(category=category, claimed_amount=amount)
                for category, amount in items
            ],
            policy_limit=POLICY_LIMIT,
            excess=EXCESS,
            co_pay_rate=CO_PAY_RATE,
        )
        try:
            calc_id = service.process_and_save(request)
        except PersistenceError as exc:
            print(f"ERROR: could not save '{label}': {exc.cause or exc}")
            sys.exit(1)
        print(f"✓ {label} → calculation {calc_id}")

    print("\n── Most recent calculations ─────────────────")
    for calc in service.get_recent_claims()[: len(DEMO_CLAIMS)]:
        print(
            f"  #{calc.id}: subtotal {calc.subtotal}, "
            f"payout {calc.final_payout} ({len(calc.claim_items)} items)"
        )

    print("\n✅ Demo seed complete.\n")


if __name__ == "__main__":
    main()
