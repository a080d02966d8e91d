"""FastAPI application entry point.

Configures the application with logging, exception handling, metrics,
health checks and the search services.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from simsearch import __version__
from simsearch.api.routes import router
from simsearch.config import get_settings
from simsearch.embeddings.documents import DocumentEmbedder
from simsearch.embeddings.service import EmbeddingService, HTTPEmbeddingService
from simsearch.exceptions import ErrorCode, SimSearchError
from simsearch.llm.client import OpenAICompatibleClient, TextCompletionClient
from simsearch.logging_config import get_logger, setup_logging
from simsearch.observability.metrics import (
    MetricsMiddleware,
    get_metrics,
    get_metrics_content_type,
)
from simsearch.rag.pipeline import RAGPipeline
from simsearch.retrieval.coordinator import RetrievalCoordinator
from simsearch.store.document_store import DocumentStore
from simsearch.store.index import MetadataIndex

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    # Startup
    settings = get_settings()
    setup_logging(level=settings.log_level)
    logger.info(
        "Starting similarity search service",
        extra={
            "version": __version__,
            "environment": settings.environment.value,
            "indexed_fields": list(app.state.store.index.fields),
        },
    )

    yield

    # Shutdown
    logger.info("Shutting down similarity search service")
    for service in (app.state.embedding_service, app.state.completion_client):
        close = getattr(service, "close", None)
        if close is not None:
            await close()


def create_app(
    store: DocumentStore | None = None,
    embedding_service: EmbeddingService | None = None,
    completion_client: TextCompletionClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        store: Document store to serve. A fresh one is created when omitted.
        embedding_service: Embedding collaborator (for testing).
        completion_client: Completion collaborator (for testing).

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Similarity Search",
        description="In-memory embedding similarity search with metadata filtering",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    if store is None:
        store = DocumentStore(index=MetadataIndex(settings.search.indexed_fields))
    if embedding_service is None:
        embedding_service = HTTPEmbeddingService(settings.embedding)
    if completion_client is None:
        completion_client = OpenAICompatibleClient(settings.llm)
    coordinator = RetrievalCoordinator(embedding_service, store, settings=settings.search)

    app.state.store = store
    app.state.embedding_service = embedding_service
    app.state.completion_client = completion_client
    app.state.coordinator = coordinator
    app.state.embedder = DocumentEmbedder(embedding_service)
    app.state.rag_pipeline = RAGPipeline(coordinator, completion_client)

    # Register middleware
    app.add_middleware(MetricsMiddleware)

    # Register exception handlers
    app.add_exception_handler(SimSearchError, search_exception_handler)

    # Register routes
    app.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/ready", readiness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/health/live", liveness_check, methods=["GET"], tags=["Health"])
    app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], tags=["Observability"])
    app.include_router(router)

    return app


async def search_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle SimSearchError exceptions.

    Converts exceptions to structured JSON responses.
    """
    if not isinstance(exc, SimSearchError):
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
        f"Request failed: {exc.message}",
        extra={
            "error_code": exc.code.value,
            "path": request.url.path,
            "details": exc.details,
        },
    )

    return JSONResponse(
        status_code=_get_status_code(exc.code),
        content=exc.to_dict(),
    )


def _get_status_code(error_code: ErrorCode) -> int:
    """Map error code to HTTP status code."""
    # Validation errors -> 400
    if error_code == ErrorCode.INVALID_ARGUMENT:
        return 400

    # Not found errors -> 404
    if error_code == ErrorCode.DOCUMENT_NOT_FOUND:
        return 404

    # Conflict errors -> 409
    if error_code == ErrorCode.DOCUMENT_EXISTS:
        return 409

    # Incompatible vectors -> 422
    if error_code == ErrorCode.DIMENSION_MISMATCH:
        return 422

    # Rate limit -> 429
    if error_code == ErrorCode.COMPLETION_RATE_LIMIT:
        return 429

    # Upstream unavailable -> 503
    if error_code in (ErrorCode.EMBEDDING_UNAVAILABLE, ErrorCode.EMBEDDING_SERVICE_ERROR):
        return 503

    # Timeout -> 504
    if error_code == ErrorCode.COMPLETION_TIMEOUT:
        return 504

    # Default to 500 for internal errors
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


async def readiness_check(request: Request, response: Response) -> dict[str, Any]:
    """Readiness check.

    The store check fails when its metadata index has drifted from the
    stored documents; the endpoint then answers 503.
    """
    store: DocumentStore = request.app.state.store
    checks: dict[str, str] = {
        "config": "ok",
        "store": "ok" if store.is_consistent() else "index_out_of_sync",
    }

    all_ok = all(v == "ok" for v in checks.values())
    if not all_ok:
        response.status_code = 503

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
        "documents": store.size(),
        "dimension": store.dimension,
        "index_size": store.index.size(),
        "timestamp": datetime.now(UTC).isoformat(),
    }


async def liveness_check() -> dict[str, str]:
    """Liveness check."""
    return {"status": "alive"}


async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=get_metrics(), media_type=get_metrics_content_type())


def main() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "simsearch.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


# Create the application instance
app = create_app()
