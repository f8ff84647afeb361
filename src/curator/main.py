"""Main FastAPI application for the subgraph curator service."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from curator.api import api_router, health_router
from curator.core.config import get_settings
from curator.database.connection import create_tables
from curator.domain.exceptions import (
    ConfigurationError,
    CuratorError,
    EmbeddingProviderError,
    QuerySetNotFoundError,
    SchemaUnavailableError,
    SourceNotFoundError,
)
from curator.observability import (
    CorrelationIDMiddleware,
    RequestLoggingMiddleware,
    configure_logging,
    get_logger,
)

logger = get_logger(__name__)

ERROR_STATUS_CODES: dict[type[CuratorError], int] = {
    SourceNotFoundError: status.HTTP_404_NOT_FOUND,
    QuerySetNotFoundError: status.HTTP_404_NOT_FOUND,
    ConfigurationError: status.HTTP_503_SERVICE_UNAVAILABLE,
    SchemaUnavailableError: status.HTTP_502_BAD_GATEWAY,
    EmbeddingProviderError: status.HTTP_502_BAD_GATEWAY,
}


def status_code_for(exc: CuratorError) -> int:
    """Map a domain exception to an HTTP status code."""
    for exc_type, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def curator_error_handler(_request: Request, exc: CuratorError) -> JSONResponse:
    """Render domain exceptions as ErrorResponse bodies."""
    code = status_code_for(exc)
    if code >= 500:
        logger.error("request.domain_error", error_code=exc.error_code, message=exc.message)
    return JSONResponse(
        status_code=code,
        content={"error": exc.error_code, "message": exc.message},
    )


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logger.info("service.starting", service=settings.service_name, debug=settings.debug)
    create_tables()

    yield

    logger.info("service.stopping", service=settings.service_name)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(
        log_level=settings.log_level,
        log_format=settings.log_format,
        development_mode=settings.debug,
    )

    app = FastAPI(
        title="Subgraph Curator",
        description="""
Subgraph discovery and multi-source query execution.

## Features

- **Discovery**: Rank registered subgraphs by blended semantic and name similarity
- **Schema cache**: Introspected schemas are fetched once and reused
- **Execution**: Run stored query sets against many subgraphs concurrently
- **Unified rows**: Declarative field mappings, sorting and range filters
        """,
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CuratorError, curator_error_handler)  # type: ignore[arg-type]

    app.include_router(health_router)  # /health, /ready
    app.include_router(api_router)  # /api/v1/...

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "curator.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
