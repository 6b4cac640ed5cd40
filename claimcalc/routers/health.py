"""Health check endpoint."""

from fastapi import APIRouter
from pydantic import BaseModel

from claimcalc.database import check_db_connection
from claimcalc.services.storage.connection import get_connection_provider
from claimcalc.settings import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    environment: str
    database: str
    version: str = "1.0.0"


@router.get("/health", response_model=HealthResponse, include_in_schema=False)
def health_check() -> HealthResponse:
    """Returns status "degraded" if the DB is unreachable."""
    db_ok = check_db_connection(get_connection_provider().engine)
    return HealthResponse(
        status="ok" if db_ok else "degraded",
        environment=settings.environment,
        database="connected" if db_ok else "unreachable",
    )
