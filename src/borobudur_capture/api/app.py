"""FastAPI application factory."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from borobudur_capture.api.sessions import router as session_router
from borobudur_capture.api.uploads import router as upload_router
from borobudur_capture.app_logging import configure_logging
from borobudur_capture.containers import AppContainer
from borobudur_capture.domain.errors import (
    CaptureError,
    InvalidIdentifierError,
    MissingFieldError,
)

API_NAME = "Borobudur Capture API"
API_VERSION = "1.0.0"

_CLIENT_ERRORS = (MissingFieldError, InvalidIdentifierError)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    access_logger = logging.getLogger("borobudur_capture.access")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            await app.state.container.object_store.ensure_bucket()
        except Exception:
            logger.exception("Failed to initialise the artifact bucket")
        yield
        await app.state.container.close_resources()

    app = FastAPI(title=API_NAME, version=API_VERSION, lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        access_logger.info(
            "%s %s %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return response

    app.include_router(upload_router)
    app.include_router(session_router)

    @app.exception_handler(CaptureError)
    async def capture_error_handler(
        request: Request, exc: CaptureError
    ) -> JSONResponse:
        if isinstance(exc, _CLIENT_ERRORS):
            status_code = status.HTTP_400_BAD_REQUEST
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            logger.error(
                "%s on %s %s: %s",
                type(exc).__name__,
                request.method,
                request.url.path,
                exc.message,
            )
        return _error_response(status_code, exc.message, type(exc).__name__)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = sorted({str(error["loc"][-1]) for error in exc.errors()})
        return _error_response(
            status.HTTP_400_BAD_REQUEST,
            f"Missing or invalid fields: {', '.join(fields)}",
            MissingFieldError.__name__,
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return _error_response(exc.status_code, "Route not found")
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(
            "Unhandled error on %s %s", request.method, request.url.path
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal Server Error",
            _debug_detail(container, exc),
        )

    @app.get("/")
    async def root() -> dict[str, str]:
        """Service banner."""
        return {"message": API_NAME, "version": API_VERSION}

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _error_response(
    status_code: int, message: str, error: str | None = None
) -> JSONResponse:
    content: dict[str, object] = {"status": "error", "message": message}
    if error is not None:
        content["error"] = error
    return JSONResponse(status_code=status_code, content=content)


def _debug_detail(container: AppContainer, exc: Exception) -> str:
    """Return the exception type, plus its message when running locally."""
    if container.settings.environment == "local":
        return f"{type(exc).__name__}: {exc}"
    return type(exc).__name__
