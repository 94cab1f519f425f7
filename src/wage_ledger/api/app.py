"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wage_ledger import __version__
from wage_ledger.api.routes import (
    health_router,
    labour_router,
    ledger_router,
    materials_router,
    wage_rates_router,
    wages_router,
)
from wage_ledger.database import dispose_db, init_db
from wage_ledger.exceptions import WageLedgerError
from wage_ledger.logging_config import configure_logging

logger = logging.getLogger(__name__)

# Domain error code -> HTTP status; unlisted codes are client errors
ERROR_STATUS = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ALREADY_PROCESSED": status.HTTP_409_CONFLICT,
    "ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "INVALID_TRANSITION": status.HTTP_409_CONFLICT,
    "STORAGE_CONFLICT": status.HTTP_409_CONFLICT,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    configure_logging()
    init_db()
    logger.info("Wage ledger API %s starting", __version__)
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Wage Ledger API",
        description="Attendance-driven wages and per-project ledgers",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(WageLedgerError)
    async def domain_exception_handler(request: Request, exc: WageLedgerError) -> JSONResponse:
        """Map domain errors to their HTTP status."""
        return JSONResponse(
            status_code=ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST),
            content={
                "detail": str(exc),
                "code": exc.code,
                "context": jsonable_encoder(exc.context),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    app.include_router(health_router)
    app.include_router(wages_router)
    app.include_router(ledger_router)
    app.include_router(wage_rates_router)
    app.include_router(materials_router)
    app.include_router(labour_router)

    return app


# Default app instance for uvicorn
app = create_app()
