"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from renaspress import __version__
from renaspress.api import api_router
from renaspress.config import get_settings
from renaspress.services.base import APIError, NotFoundError, RateLimitError
from renaspress.services.storage import StorageConfigError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


def configured(value: object) -> str:
    return "configured" if value else "NOT CONFIGURED"


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan - runs on startup and shutdown."""
    # Startup
    logger.info("Starting %s v%s", settings.app_name, __version__)
    logger.info("Debug mode: %s", settings.debug)
    logger.info("Database: %s", settings.database_url.split("///")[-1])  # Hide path details
    logger.info("BunnyCDN storage: %s", configured(settings.storage_configured))
    logger.info("Google Translate: %s", configured(settings.google_translate_api_key))
    logger.info("NewsAPI: %s", configured(settings.newsapi_key))

    # Validate and log warnings
    warnings = settings.validate_runtime_config()
    if warnings:
        logger.warning("Configuration warnings:")
        for warning in warnings:
            logger.warning("  - %s", warning)
    else:
        logger.info("Configuration validation passed - no warnings")

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Application shutting down")


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)


def error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTPExceptions raised by routes as ``{"error": ...}``."""
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as 400 with readable messages."""
    messages = []
    for err in exc.errors():
        custom = err.get("ctx", {}).get("error")
        if custom is not None:
            messages.append(str(custom))
        else:
            field = ".".join(str(part) for part in err["loc"] if part != "body")
            messages.append(f"{field}: {err['msg']}" if field else err["msg"])
    return error_response(400, ". ".join(messages) or "Invalid request")


@app.exception_handler(NotFoundError)
async def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    """Handle NotFoundError exceptions globally."""
    return error_response(404, str(exc) or "Resource not found")


@app.exception_handler(RateLimitError)
async def rate_limit_error_handler(_request: Request, exc: RateLimitError) -> JSONResponse:
    """Handle RateLimitError exceptions globally."""
    headers = {}
    if exc.retry_after:
        headers["Retry-After"] = str(exc.retry_after)
    return error_response(429, str(exc) or "Rate limit exceeded", headers=headers)


@app.exception_handler(APIError)
async def api_error_handler(_request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions globally."""
    return error_response(exc.status_code or 500, str(exc) or "External API error")


@app.exception_handler(StorageConfigError)
async def storage_config_error_handler(_request: Request, exc: StorageConfigError) -> JSONResponse:
    logger.error("Storage configuration error: %s", exc)
    return error_response(500, str(exc))


@app.exception_handler(IntegrityError)
async def integrity_error_handler(_request: Request, exc: IntegrityError) -> JSONResponse:
    """Unique or foreign-key violations that slipped past route checks."""
    logger.warning("Integrity error: %s", exc.orig)
    return error_response(400, "Request conflicts with existing data")


@app.exception_handler(Exception)
async def unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", exc_info=exc)
    return error_response(500, "Internal server error")


# Include API router
app.include_router(api_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the API is running."""
    return {"status": "healthy", "version": __version__}
