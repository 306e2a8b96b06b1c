"""
Corporate CMS - Content Lifecycle & Authorization Core

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from cms.config import get_settings
from cms.database import init_db, close_db
from cms.api.v1 import router as api_v1_router
from cms.api.middleware.request_id import RequestIdMiddleware
from cms.kernel.errors import CoreError, ValidationError
from cms.schemas.common import HealthResponse
from cms.logging_config import configure_logging, get_logger

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown tasks.
    """
    # Configure logging first
    configure_logging(
        log_level=settings.log_level,
        environment=settings.environment,
        debug=settings.debug,
    )

    # Startup
    logger.info("Starting %s v%s", settings.project_name, settings.version)
    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


# Create FastAPI application
app = FastAPI(
    title=settings.project_name,
    description="""
    Corporate CMS - Content Lifecycle & Authorization Core

    ## Features

    - **Content Status**: Blog posts, job listings and projects move through
      role-gated editorial workflows
    - **Site Settings**: Global key/value settings updated in atomic batches
    - **Audit**: Every status change and settings batch is attributable

    ## Invariants

    1. Status changes only follow the kind's transition graph
    2. Audit record and state change commit together or not at all
    3. published_at is stamped once, on first publish
    """,
    version=settings.version,
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


# Middleware order: add_middleware stacks innermost-first, so LAST added = OUTERMOST.
# CORS must be outermost so every response, errors included, gets CORS headers.
_cors_origins = list(settings.cors_origins)

app.add_middleware(RequestIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _cors_headers(request: Request) -> dict:
    """Return CORS headers for error responses so browser receives them (500s often bypass CORS middleware)."""
    origin = request.headers.get("origin") or ""
    allow_origin = origin if origin in _cors_origins else (_cors_origins[0] if _cors_origins else "*")
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Credentials": "true",
        "Access-Control-Allow-Methods": "*",
        "Access-Control-Allow-Headers": "*",
    }


def _error_headers(request: Request) -> dict:
    headers = _cors_headers(request)
    req_id = getattr(request.state, "request_id", None)
    if req_id:
        headers["X-Request-ID"] = req_id
    return headers


# Exception handlers (include CORS headers so 4xx/5xx responses are not blocked by browser)
@app.exception_handler(CoreError)
async def core_error_handler(request: Request, exc: CoreError):
    """Map typed core errors to their status code and public payload."""
    if exc.http_status >= 500:
        logger.error(
            "Request failed: %s",
            exc.message,
            extra={"code": exc.code, "path": request.url.path},
        )
    else:
        logger.info(
            "Request rejected: %s",
            exc.message,
            extra={"code": exc.code, "path": request.url.path},
        )
    headers = _error_headers(request)
    if exc.http_status == status.HTTP_401_UNAUTHORIZED:
        headers["WWW-Authenticate"] = "Bearer"
    return JSONResponse(status_code=exc.http_status, content=exc.to_payload(), headers=headers)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Ensure 401/403/404 etc. responses have CORS headers."""
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": detail},
        headers=_error_headers(request),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
):
    """Malformed request bodies and path parameters are 400 validation errors."""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })
    content = ValidationError().to_payload()
    content["errors"] = errors
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=content,
        headers=_error_headers(request),
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
):
    """Handle unexpected exceptions. CORS headers added so browser does not hide 500 behind CORS error."""
    logger.exception("Unhandled exception: %s", exc)
    req_id = getattr(request.state, "request_id", None)
    if settings.debug:
        content = {
            "error": str(exc),
            "type": type(exc).__name__,
            "request_id": req_id,
        }
    else:
        content = {"error": "Internal server error", "request_id": req_id}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=content,
        headers=_error_headers(request),
    )


# Health check endpoint
@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Check application health."""
    return HealthResponse(
        status="ok",
        version=settings.version,
        database="connected",
    )


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.project_name,
        "version": settings.version,
        "docs": "/docs" if settings.debug else "disabled",
        "api": {
            "v1": settings.api_v1_prefix,
        },
    }


# Mount API v1 routes
app.include_router(
    api_v1_router,
    prefix=settings.api_v1_prefix,
)


# Main entry point for development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cms.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
