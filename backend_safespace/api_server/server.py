"""
FastAPI server — authenticated scan API over the scan record store.

create_app() builds the ASGI app from Settings: CORS, request logging,
routers under API_PREFIX, and the JSON error contract
{"success": false, "message": ...} for every domain error.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend_safespace import __version__
from backend_safespace.api_server.middleware import install_middleware
from backend_safespace.api_server.scan_routes import dashboard_router, message_router, url_router
from backend_safespace.config import Settings, get_settings
from backend_safespace.core.exceptions import ScanServiceError, StoreUnavailable
from backend_safespace.database import ScanStore, get_scan_store
from backend_safespace.safespace_logging import get_logger

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Lifespan: open the store early so schema problems show up in startup logs
# -----------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if app.state.store is None:
        app.state.store = get_scan_store(settings.database_url)
    else:
        try:
            app.state.store.ensure_schema()
        except StoreUnavailable:
            logger.warning("api_store_unavailable_at_startup")
    logger.info("api_started", app_env=settings.app_env, api_prefix=settings.api_prefix)
    yield
    logger.info("api_stopped")


# -----------------------------------------------------------------------------
# Error handlers
# -----------------------------------------------------------------------------


def _error(status_code: int, message: str, **extra: Any) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "message": message}
    content.update(extra)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def scan_error_handler(request: Request, exc: ScanServiceError) -> JSONResponse:
    """Domain errors → their status code and client-safe message."""
    if exc.status_code >= 500:
        logger.warning("api_scan_error", path=request.url.path, error=type(exc).__name__)
    return _error(exc.status_code, exc.message)


def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body/query validation failures → 400 with per-field messages."""
    errors = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ())[1:]),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    return _error(400, "Validation failed", errors=errors)


def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException (404 route, 405, ...)."""
    return _error(exc.status_code, str(exc.detail))


def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("api_unhandled_error", path=request.url.path, error=str(exc))
    return _error(500, "Server error")


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------


def create_app(settings: Settings | None = None, store: ScanStore | None = None) -> FastAPI:
    """
    Build the API.

    settings: defaults to get_settings() (environment).
    store: ScanStore to use; default is created lazily from settings.database_url.
    """
    settings = settings or get_settings()
    app = FastAPI(
        title="Backend SafeSpace API",
        description="URL and message safety scans with per-user history.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_middleware(app)

    app.add_exception_handler(ScanServiceError, scan_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    prefix = settings.api_prefix
    app.include_router(url_router, prefix=prefix)
    app.include_router(message_router, prefix=prefix)
    app.include_router(dashboard_router, prefix=prefix)

    @app.get(f"{prefix}/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up (does not touch the database)."""
        return {
            "status": "success",
            "message": "Server is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": settings.app_env,
        }

    return app
