"""
FastAPI application factory.

Uses lifespan context manager to handle startup/shutdown tasks cleanly.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from claimcalc.routers import claims, health
from claimcalc.schemas.claim import INVALID_INPUT_MESSAGE, NEGATIVE_VALUES_MESSAGE
from claimcalc.schemas.common import ErrorDetail, ErrorResponse
from claimcalc.services.storage.errors import PersistenceError
from claimcalc.settings import settings

# ── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

_BOUNDARY_MESSAGES = {INVALID_INPUT_MESSAGE, NEGATIVE_VALUES_MESSAGE}


# ── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    logger.info("Starting Claim Payout API [env=%s]", settings.environment)

    from claimcalc.database import check_db_connection
    from claimcalc.services.storage.connection import (
        get_connection_provider,
        reset_connection_provider,
    )

    # Report DB connectivity on startup; requests still surface failures
    if not check_db_connection(get_connection_provider().engine):
        logger.error("Database is not reachable on startup — check DATABASE_URL")
    else:
        logger.info("Database connection verified")

    yield

    logger.info("Shutting down Claim Payout API")
    reset_connection_provider()


# ── Exception handlers ────────────────────────────────────────────────────────
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject malformed or out-of-range claims with 400 and a readable message."""
    details = [
        ErrorDetail(
            field=".".join(str(part) for part in err.get("loc", ()) if part != "body")
            or None,
            message=err.get("msg", ""),
        )
        for err in exc.errors()
    ]
    error = next(
        (d.message for d in details if d.message in _BOUNDARY_MESSAGES),
        INVALID_INPUT_MESSAGE,
    )
    body = ErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())


async def persistence_exception_handler(
    request: Request, exc: PersistenceError
) -> JSONResponse:
    logger.error("Persistence failure (%s) on %s %s", exc.operation, request.method, request.url.path)
    body = ErrorResponse(
        error=f"Could not {exc.operation} claim calculations. Please try again later."
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump()
    )


# ── App factory ───────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title="Claim Payout Calculator",
        description=(
            "Calculates travel insurance claim payouts from itemised claims — "
            "per-category inner limits, policy excess, co-pay and the policy "
            "limit — and keeps a history of recent calculations."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
    )

    # ── CORS ──────────────────────────────────────────────────────────────────
    # Dev: allow all origins. Staging/prod: explicit allowlist from ALLOWED_ORIGINS env var.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(PersistenceError, persistence_exception_handler)

    # ── Routers ───────────────────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(claims.router)

    return app


app = create_app()
