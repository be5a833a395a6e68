"""Main FastAPI application module."""

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from glooscap.api.v1.router import router as v1_router
from glooscap.catalog.jobs import JobRegistry
from glooscap.catalog.store import PageCatalog
from glooscap.core.config import settings
from glooscap.middleware.correlation import CorrelationMiddleware
from glooscap.middleware.errors import ErrorHandlingMiddleware
from glooscap.middleware.metrics import MetricsMiddleware


def create_app(
    catalog: PageCatalog | None = None,
    jobs: JobRegistry | None = None,
) -> FastAPI:
    """
    Build the read API over a page catalog and a job registry.

    Args:
    ----
        catalog: Catalog to serve; a fresh one is created when omitted
        jobs: Job registry to serve; a fresh one is created when omitted

    Returns:
    -------
        The configured FastAPI application
    """
    app = FastAPI(
        title=settings.app_name,
        description="Wiki page catalog and translation job status",
        version=settings.version,
        default_response_class=JSONResponse,
    )
    app.state.catalog = catalog if catalog is not None else PageCatalog()
    app.state.jobs = jobs if jobs is not None else JobRegistry()

    # Each add_middleware call wraps the previous stack, so error handling
    # ends up outermost and sees failures from every other layer.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*", "Content-Type", "X-Request-ID"],
        expose_headers=["X-Request-ID"],
        max_age=600,
    )
    app.add_middleware(CorrelationMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(ErrorHandlingMiddleware)

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Expose Prometheus metrics."""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/healthz")
    async def health_check(request: Request) -> dict[str, str]:
        """Liveness probe."""
        return {
            "status": "healthy",
            "version": settings.version,
            "correlation_id": getattr(request.state, "correlation_id", ""),
        }

    app.include_router(v1_router, prefix=settings.api_prefix)
    return app


app = create_app()
