"""
backend/bettracker/main.py

Purpose:
    FastAPI application bootstrap: logging setup, CORS and request logging
    middleware, the stats router and the exception handlers that turn
    domain errors into HTTP responses.

Dependencies:
    - bettracker.config
    - bettracker.routers.stats
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bettracker.config import settings
from bettracker.errors import PlanLimitError, WagerApiError
from bettracker.middleware.logging import StructuredLoggingMiddleware, setup_logging
from bettracker.routers.stats import router as stats_router
from bettracker.utils import utcnow

logger = logging.getLogger("bettracker")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("%s started", settings.APP_NAME)
    yield
    logger.info("%s stopped", settings.APP_NAME)


app = FastAPI(
    title=settings.APP_NAME,
    description="Personal sports wager tracker: statistics, export and plan usage",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

# Structured logging
app.add_middleware(StructuredLoggingMiddleware)

app.include_router(stats_router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Return clean validation errors without leaking internal field paths."""
    errors = []
    for err in exc.errors():
        loc = err.get("loc", ())
        # Strip the "body" / "query" prefix
        field = ".".join(str(part) for part in loc[1:]) if len(loc) > 1 else str(loc[-1]) if loc else "unknown"
        errors.append({"field": field, "message": err.get("msg", "Invalid value.")})
    return JSONResponse(status_code=422, content={"detail": "Validation error.", "errors": errors})


@app.exception_handler(PlanLimitError)
async def plan_limit_handler(request: Request, exc: PlanLimitError):
    return JSONResponse(status_code=403, content={"detail": exc.message})


@app.exception_handler(WagerApiError)
async def wager_api_error_handler(request: Request, exc: WagerApiError):
    logger.error("Wager API error on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=502, content={"detail": "Wager service unavailable."})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    logger.warning("ValueError on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": "Invalid input."})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all: log the real error, return a safe generic message."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "An internal error occurred."})


@app.get("/health")
async def health():
    return {"status": "healthy", "app": settings.APP_NAME, "time": utcnow().isoformat()}
