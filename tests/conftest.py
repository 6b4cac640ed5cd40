"""
Test fixtures and shared setup.

Every test that touches storage gets its own in-memory SQLite database
(tables created fresh, engine disposed afterwards), so tests never see
each other's calculations and no database server is required.
"""

import os
from decimal import Decimal

import pytest

# ── Override settings BEFORE importing app modules ────────────────────────────
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATABASE_AUTH_MODE", "static")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient

from claimcalc.database import build_engine, build_session_factory
from claimcalc.main import app
from claimcalc.models import Base
from claimcalc.schemas.claim import ClaimItemIn, ClaimRequest
from claimcalc.services.claims import ClaimCalculationService, get_claim_service
from claimcalc.services.storage.claim_store import ClaimStore


def _make_request(
    items,
    policy_limit="1000",
    excess="100",
    co_pay_rate="0.2",
) -> ClaimRequest:
    """Build a validated ClaimRequest from (category, amount) pairs."""
    return ClaimRequest(
        claim_items=[
            ClaimItemIn(category=category, claimed_amount=Decimal(str(amount)))
            for category, amount in items
        ],
        policy_limit=Decimal(str(policy_limit)),
        excess=Decimal(str(excess)),
        co_pay_rate=Decimal(str(co_pay_rate)),
    )


@pytest.fixture
def make_request():
    """Factory fixture: make_request([("Medical", 900)], excess="50")."""
    return _make_request


# ── Storage ───────────────────────────────────────────────────────────────────


@pytest.fixture
def engine():
    test_engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def store(session_factory) -> ClaimStore:
    return ClaimStore(session_factory)


@pytest.fixture
def broken_store() -> ClaimStore:
    """A store whose database has no tables — every statement fails."""
    bare_engine = build_engine("sqlite://")
    yield ClaimStore(build_session_factory(bare_engine))
    bare_engine.dispose()


@pytest.fixture
def service(store) -> ClaimCalculationService:
    return ClaimCalculationService(store)


# ── API ───────────────────────────────────────────────────────────────────────


@pytest.fixture
def client(service) -> TestClient:
    """FastAPI test client with the claim service bound to the test database."""
    app.dependency_overrides[get_claim_service] = lambda: service
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def scenario_request() -> ClaimRequest:
    """Medical 900 + Electronics 300, excess 100, co-pay 20%, limit 1000 → 760."""
    return _make_request([("Medical", 900), ("Electronics", 300)])
