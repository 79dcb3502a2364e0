"""Main entry point for the Tutorbook application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from tutorbook.api.v1 import (
    movements_router,
    reports_router,
    sessions_router,
    students_router,
    system_router,
)
from tutorbook.api.v1.dependencies import (
    get_clock,
    get_ledger,
    get_marker_store,
    get_rollover_scheduler,
)
from tutorbook.core.errors import TutorbookError, status_code_for
from tutorbook.core.settings import settings
from tutorbook.db.session import SessionLocal, create_tables

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Tutorbook API",
    description="Class scheduling and monthly ledger for a tutoring practice",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(sessions_router, prefix="/api/v1")
app.include_router(movements_router, prefix="/api/v1")
app.include_router(reports_router, prefix="/api/v1")
app.include_router(students_router, prefix="/api/v1")
app.include_router(system_router, prefix="/api/v1")


@app.exception_handler(TutorbookError)
async def handle_tutorbook_error(_request: Request, exc: TutorbookError) -> JSONResponse:
    """Translate core errors into HTTP responses."""
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("Request failed: %s", exc)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "error": type(exc).__name__},
    )


async def run_startup_rollover() -> None:
    """Carry last month's unpaid balances forward once per month."""
    db = SessionLocal()
    try:
        scheduler = get_rollover_scheduler(db, get_ledger(db), get_marker_store(), get_clock())
        result = await scheduler.run()
    except TutorbookError:
        logger.exception("Monthly rollover failed; it will be retried on next startup")
        return
    finally:
        db.close()
    if not result.already_done:
        logger.info(
            "Monthly rollover for %s created %d movements", result.month_key, len(result.created)
        )


@app.on_event("startup")
async def on_startup() -> None:
    create_tables()
    if settings.rollover_on_startup:
        await run_startup_rollover()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("tutorbook.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
