"""
FastAPI application factory.

Uses lifespan context manager (preferred over on_event decorators in FastAPI 0.93+)
to handle startup/shutdown tasks cleanly.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.routers import health, imports, practices, pricing, procedures
from app.schemas.common import ErrorResponse
from app.services.errors import StoreError
from app.settings import settings

# ── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    logger.info("Starting Medical Price Compare API [env=%s]", settings.environment)

    # Verify DB connectivity on startup (fail fast)
    from app.database import check_db_connection

    if not check_db_connection():
        logger.error("Database is not reachable on startup — check DATABASE_URL")
    else:
        logger.info("Database connection verified")

    yield  # ── Application runs here ──

    logger.info("Shutting down Medical Price Compare API")


# ── Error handlers ────────────────────────────────────────────────────────────
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    logger.error("Store error on %s %s: %s", request.method, request.url.path, exc)
    body = ErrorResponse(error="store_error", details=[{"message": str(exc)}])
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(),
    )


# ── App factory ───────────────────────────────────────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title="Medical Procedure Price Compare",
        description=(
            "Search medical procedures, compare what each practice charges for "
            "a procedure, and bulk-import procedure, practice and pricing data."
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

    app.add_exception_handler(StoreError, store_error_handler)

    # ── Routers ───────────────────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(practices.router)
    app.include_router(procedures.router)
    app.include_router(pricing.router)
    app.include_router(imports.router)

    return app


app = create_app()
