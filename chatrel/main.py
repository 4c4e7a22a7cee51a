"""
ChatREL relationship analysis backend.

FastAPI application factory.
Mounts routers, configures middleware, logging, and exception handlers.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chatrel.api import chat, health, sessions
from chatrel.config import get_settings
from chatrel.engine.errors import (
    ChatRelError,
    InputRejectedError,
    MalformedResponseError,
    ServiceUnavailableError,
    TaskBusyError,
)
from chatrel.middleware import RequestLoggingMiddleware

logger = logging.getLogger("chatrel")

# Typed engine failures -> HTTP status
_ERROR_STATUS: dict[type[ChatRelError], int] = {
    InputRejectedError: 422,
    ServiceUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    MalformedResponseError: status.HTTP_502_BAD_GATEWAY,
    TaskBusyError: status.HTTP_409_CONFLICT,
}

_ERROR_DETAIL: dict[type[ChatRelError], str] = {
    InputRejectedError: "Please provide a non-empty chat log or message.",
    ServiceUnavailableError: "The analysis service is unreachable. Please try again.",
    MalformedResponseError: "The analysis service returned a malformed response.",
    TaskBusyError: "This request is already being processed.",
}


def _configure_logging() -> None:
    """Set up structured logging for the application."""
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    fmt = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(log_level)
    root.handlers.clear()
    root.addHandler(handler)

    # Quiet noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup logic runs before ``yield``, shutdown logic runs after.
    """
    settings = get_settings()
    logger.info(
        "%s v%s starting up [%s] | deep=%s | quick=%s",
        settings.app_name,
        settings.app_version,
        settings.environment,
        settings.deep_model,
        settings.quick_model,
    )
    if not settings.inference_api_key:
        logger.warning("INFERENCE_API_KEY is not set; analysis calls will fail")
    yield
    logger.info("%s shutting down", settings.app_name)


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    _configure_logging()
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="AI relationship analysis of two-party chat transcripts.",
        lifespan=lifespan,
    )

    # --- Exception Handlers ---
    @app.exception_handler(ChatRelError)
    async def chatrel_error_handler(request: Request, exc: ChatRelError) -> JSONResponse:
        """Map typed engine failures to a short, human-readable JSON error."""
        status_code = _ERROR_STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        logger.warning(
            "Request failed | %s %s | %s | %s",
            request.method,
            request.url.path,
            exc.error_code,
            str(exc),
        )
        return JSONResponse(
            status_code=status_code,
            content={
                "error": exc.error_code,
                "detail": _ERROR_DETAIL.get(type(exc), str(exc)),
                "retryable": exc.retryable,
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch unhandled exceptions and return a clean 500 response."""
        logger.exception(
            "Unhandled error | %s %s | %s",
            request.method,
            request.url.path,
            str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "detail": "An unexpected error occurred. Please try again later.",
            },
        )

    # --- Middleware (order matters: last added = first executed) ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    # --- Routers ---
    app.include_router(health.router)
    app.include_router(sessions.router)
    app.include_router(chat.router)

    return app


# Module-level app instance for uvicorn
app = create_app()
