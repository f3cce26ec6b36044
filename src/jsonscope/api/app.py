"""FastAPI application factory for jsonscope."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from jsonscope import __version__
from jsonscope.api.deps import init_services, reset_services
from jsonscope.api.middleware import RequestBodyLimitMiddleware, RequestTimingMiddleware
from jsonscope.api.routers import documents, schemas
from jsonscope.api.schemas import HealthResponse
from jsonscope.schema.registry import SchemaRegistry
from jsonscope.service.analyzer import DocumentAnalyzer
from jsonscope.settings import Settings

logger = logging.getLogger("jsonscope.api")


def build_services(settings: Settings) -> tuple[SchemaRegistry, DocumentAnalyzer]:
    """Create the registry (with bundled schemas) and analyzer from settings."""
    registry = SchemaRegistry()
    if settings.schema_dir is not None:
        registry.load_directory(settings.schema_dir)
    analyzer = DocumentAnalyzer(
        max_document_size=settings.max_document_size,
        check_additional_properties=settings.check_additional_properties,
    )
    return registry, analyzer


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Set up the shared services alongside the application."""
    settings: Settings = app.state.settings
    init_services(*build_services(settings))
    try:
        yield
    finally:
        reset_services()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="jsonscope",
        description=(
            "Parses JSON and JSON Lines text with line tracking and validates "
            "it against JSON-Schema-like schemas."
        ),
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Middleware
    app.add_middleware(RequestTimingMiddleware)
    app.add_middleware(RequestBodyLimitMiddleware)

    app.include_router(documents.router, prefix="/documents", tags=["documents"])
    app.include_router(schemas.router, prefix="/schemas", tags=["schemas"])

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return app


def main() -> None:
    """Run the REST API server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "jsonscope API Server v%s starting (host=%s, port=%d)",
        __version__, settings.api_server_host, settings.effective_port,
    )

    uvicorn.run(
        "jsonscope.api.app:create_app",
        factory=True,
        host=settings.api_server_host,
        port=settings.effective_port,
        log_level=settings.log_level.lower(),
    )
