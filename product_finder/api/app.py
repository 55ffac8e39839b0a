"""FastAPI application entry point.

Configures the application with logging, metrics, exception handling,
health checks and the product routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

import uvicorn
from fastapi import Depends, FastAPI, Request, Response
from fastapi.exception_handlers import (
    request_validation_exception_handler as default_validation_handler,
)
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from product_finder import __version__
from product_finder.api.dependencies import close_services, get_vector_store
from product_finder.api.routes import invalid_request_response, router
from product_finder.config import get_settings
from product_finder.exceptions import ErrorCode, ProductFinderError
from product_finder.logging_config import get_logger, setup_logging
from product_finder.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)
from product_finder.vectorstore.service import VectorStore

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info(
        "Starting Product Finder",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
        },
    )

    yield

    # Shutdown
    await close_services()
    logger.info("Shutting down Product Finder")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Product Finder",
        description="Semantic product search with LLM recommendations",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_middleware(MetricsMiddleware)
    app.add_exception_handler(ProductFinderError, product_finder_exception_handler)
    app.add_exception_handler(
        RequestValidationError, request_validation_exception_handler
    )

    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route(
        "/metrics", metrics_endpoint, methods=["GET"], tags=["Observability"]
    )
    app.include_router(router)

    return app


async def product_finder_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Convert ProductFinderError raised outside the pipeline to JSON."""
    if not isinstance(exc, ProductFinderError):
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": ErrorCode.INTERNAL_ERROR.value,
                    "message": str(exc),
                    "details": {},
                }
            },
        )

    logger.error(
        "Request failed",
        extra={
            "error_code": exc.code.value,
            "error_message": exc.message,
            "path": request.url.path,
        },
    )

    return JSONResponse(
        status_code=_get_status_code(exc.code),
        content=exc.to_dict(),
    )


async def request_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Answer unparseable product requests with the 400 SearchResponse body."""
    response = invalid_request_response(request.url.path)
    if response is None:
        return await default_validation_handler(request, exc)  # type: ignore[arg-type]

    logger.info(
        "Rejected malformed request",
        extra={"path": request.url.path},
    )
    return response


def _get_status_code(error_code: ErrorCode) -> int:
    """Map error code to HTTP status code."""
    if error_code == ErrorCode.VALIDATION_ERROR:
        return 400

    if error_code in (ErrorCode.COLLECTION_NOT_FOUND, ErrorCode.TEMPLATE_NOT_FOUND):
        return 404

    if error_code == ErrorCode.COLLECTION_EXISTS:
        return 409

    if error_code == ErrorCode.LLM_RATE_LIMIT:
        return 429

    if error_code in (ErrorCode.LLM_TIMEOUT, ErrorCode.REQUEST_TIMEOUT):
        return 504

    return 500


async def health_check() -> dict[str, Any]:
    """Basic health check endpoint.

    Returns:
        Health status with version and timestamp.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def readiness_check(
    vector_store: VectorStore = Depends(get_vector_store),
) -> JSONResponse:
    """Readiness probe; checks that the product collection is reachable."""
    checks: dict[str, str] = {"config": "ok"}

    try:
        exists = await vector_store.collection_exists()
        checks["vector_store"] = "ok" if exists else "collection_missing"
    except ProductFinderError as e:
        logger.warning("Vector store not reachable", extra={"error_message": e.message})
        checks["vector_store"] = "unavailable"

    all_ok = all(v == "ok" for v in checks.values())

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "checks": checks,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )


async def liveness_check() -> dict[str, str]:
    """Liveness probe.

    Returns:
        Liveness status.
    """
    return {"status": "alive"}


async def metrics_endpoint() -> Response:
    """Prometheus scrape endpoint."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


def run() -> None:
    """Serve the API with uvicorn (``product-finder-api``)."""
    settings = get_settings()
    uvicorn.run(
        "product_finder.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


# Create the application instance
app = create_app()
