"""FastAPI application entrypoint. No business logic; only wiring, middleware and error handlers."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import Callable
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from tracker.api import router as api_router
from tracker.api.deps import RequestAudit, validation_message
from tracker.core.cache import ResponseCache
from tracker.core.config import Settings, settings
from tracker.core.database import SessionLocal
from tracker.core.errors import StorageError, TrackerError
from tracker.core.ratelimit import FixedWindowLimiter
from tracker.services.audit import AuditLogger

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)
# Uncaught handler errors; also appended to settings.ERROR_LOG_PATH when set.
error_logger = logging.getLogger("tracker.errors")

API_NOT_FOUND_MESSAGE = "API endpoint not found. Check route URL."


def configure_error_log(path: str) -> None:
    """Attach a file handler for uncaught errors (once per path)."""
    if not path:
        return
    for handler in error_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename.endswith(path):
            return
    handler = logging.FileHandler(path, encoding="utf-8", delay=True)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(message)s", datefmt="%Y-%m-%dT%H:%M:%SZ")
    )
    error_logger.addHandler(handler)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _report_server_error(request: Request, exc: Exception, label: str) -> None:
    error_logger.error(
        "%s: %s %s - %s", label, request.method, request.url.path, exc, exc_info=exc
    )
    RequestAudit(request, request.app.state.audit)("SERVER_ERROR", {"error": str(exc)})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(TrackerError)
    async def tracker_error_handler(request: Request, exc: TrackerError) -> JSONResponse:
        if exc.status_code >= 500:
            _report_server_error(request, exc, "SERVER ERROR")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error(400, validation_message(list(exc.errors())))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == 404 and exc.detail == "Not Found":
            return _error(404, API_NOT_FOUND_MESSAGE)
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        _report_server_error(request, exc, "DB ERROR")
        error = StorageError("Database error")
        return _error(error.status_code, error.message)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        _report_server_error(request, exc, "GLOBAL ERROR")
        return _error(500, "Internal Server Error")


def create_app(
    app_settings: Settings | None = None,
    session_factory: Callable[[], Session] | None = None,
) -> FastAPI:
    """Build the application. Tests pass their own settings and session factory."""
    cfg = app_settings or settings
    factory = session_factory or SessionLocal

    app = FastAPI(
        title="Constituency Development Tracker API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.session_factory = factory
    app.state.cache = ResponseCache(ttl_seconds=cfg.CACHE_TTL_SECONDS)
    app.state.audit = AuditLogger(factory)
    app.state.auth_limiter = FixedWindowLimiter(
        cfg.AUTH_RATE_LIMIT_MAX, cfg.AUTH_RATE_LIMIT_WINDOW_SECONDS
    )

    origins = cfg.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins if cfg.APP_ENV == "dev" or "*" not in origins else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    configure_error_log(cfg.ERROR_LOG_PATH)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=cfg.API_PREFIX)
    Path(cfg.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=cfg.UPLOAD_DIR), name="uploads")

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "Constituency Development Tracker API"}

    logger.info("App created: env=%s api_prefix=%s", cfg.APP_ENV, cfg.API_PREFIX)
    return app


app = create_app()
