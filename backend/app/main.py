"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.routes import records, stats
from app.config import settings
from app.db.database import engine
from app.db.exceptions import DatabaseError
from app.middleware.request_id import RequestIDMiddleware
from app.models.envelope import ApiError, error_response

logger = logging.getLogger(__name__)

SERVICE_NAME = "Document Registry API"

# Configure logging format based on dev_mode
if not settings.dev_mode:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format='{"time":"%(asctime)s","level":"%(levelname)s","name":"%(name)s","message":"%(message)s"}',
    )
else:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager - logs configuration and disposes the engine."""
    logger.info("%s v%s starting", SERVICE_NAME, app.version)
    logger.info("Portal URL: %s", settings.portal_url)
    if settings.auth_disabled:
        logger.warning("Session verification is DISABLED")
    yield
    await engine.dispose()
    logger.info("%s stopped", SERVICE_NAME)


app = FastAPI(
    title=SERVICE_NAME,
    description="Document and folder registry behind portal session auth",
    version="1.0.0",
    docs_url="/docs" if settings.dev_mode else None,
    redoc_url="/redoc" if settings.dev_mode else None,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Security headers middleware
# ---------------------------------------------------------------------------

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if not settings.dev_mode:
            response.headers["Strict-Transport-Security"] = (
                "max-age=63072000; includeSubDomains"
            )
        return response


app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIDMiddleware)


# ---------------------------------------------------------------------------
# Global exception handlers
# ---------------------------------------------------------------------------

_ERROR_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHENTICATED",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    500: "INTERNAL_ERROR",
}


@app.exception_handler(StarletteHTTPException)
async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code == 404 and message == "Not Found":
        message = f"Route not found: {request.url.path}"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(ApiError(code=code, message=message)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        ApiError(
            code="VALIDATION_ERROR",
            message=err["msg"],
            field=".".join(str(p) for p in err["loc"][1:]) or None,
        )
        for err in exc.errors()
    ]
    return JSONResponse(status_code=422, content=error_response(*errors))


@app.exception_handler(DatabaseError)
async def _database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    detail = str(exc) if settings.dev_mode else "Database unavailable"
    return JSONResponse(status_code=500, content=error_response(ApiError(code="DATABASE_ERROR", message=detail)))


@app.exception_handler(Exception)
async def _global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=True)
    detail = str(exc) if settings.dev_mode else "Internal server error"
    return JSONResponse(status_code=500, content=error_response(ApiError(code="INTERNAL_ERROR", message=detail)))


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Session-Token", "Accept"],
)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(records.router, prefix="/api/documentos", tags=["records"])
app.include_router(stats.router, prefix="/api/stats", tags=["stats"])

# ---------------------------------------------------------------------------
# System endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
async def health_check() -> dict:
    """Report whether the registry table is reachable."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        database = "connected"
    except Exception:
        logger.warning("Health check could not reach the database", exc_info=True)
        database = "disconnected"

    return {
        "status": "healthy" if database == "connected" else "unhealthy",
        "database": database,
        "timestamp": datetime.now(UTC).isoformat(),
        "service": SERVICE_NAME,
    }


@app.get("/")
async def root() -> dict:
    """Service banner and endpoint map."""
    return {
        "status": "online",
        "service": SERVICE_NAME,
        "version": app.version,
        "timestamp": datetime.now(UTC).isoformat(),
        "endpoints": {
            "records": "/api/documentos",
            "stats": "/api/stats",
            "health": "/health",
        },
    }
