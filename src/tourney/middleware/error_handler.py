"""Exception handlers. Every error response is JSON with a "detail" key."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tourney.exceptions import ConflictError, StoreError, TourneyError

logger = structlog.get_logger()

# Seconds a client should wait before retrying after a store outage
STORE_RETRY_AFTER = 5


def _detail(status_code: int, detail: object, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=headers)


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return _detail(exc.status_code, exc.detail, getattr(exc, "headers", None))

    @app.exception_handler(TourneyError)
    async def domain_exception_handler(request: Request, exc: TourneyError) -> JSONResponse:
        """Map domain errors to their HTTP status.

        Conflicts and store outages are logged since they point at contention
        or infrastructure trouble rather than a bad request.
        """
        headers = None
        if isinstance(exc, StoreError):
            logger.error("store_unavailable", path=request.url.path, error=exc.detail)
            headers = {"Retry-After": str(STORE_RETRY_AFTER)}
        elif isinstance(exc, ConflictError):
            logger.warning("write_conflict", path=request.url.path, error=exc.detail)
        elif exc.status_code >= 500:
            logger.error("domain_error", path=request.url.path, error=exc.detail, error_type=type(exc).__name__)
        return _detail(exc.status_code, exc.detail, headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": "Validation error", "errors": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions — always return JSON."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return _detail(500, "Internal server error")
