# Import all models here so Alembic's env.py can discover them via Base.metadata
from claimcalc.models.base import Base  # noqa: F401
from claimcalc.models.claim import ClaimCalculationRecord, ClaimCalculationItemRecord  # noqa: F401
