"""
FastAPI Application Factory & Configuration.

This module initializes the read-only query surface. It is responsible for:
1.  **Middleware Setup**: CORS so dashboards on other origins can poll it.
2.  **Exception Handling**: Global handlers so every error returns structured JSON.
3.  **Routing**: Mounting the environments router and the liveness probe.
4.  **Lifecycle**: Loading the environment list once and building the coordinator.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`). Tests pass a
fabricated environment list and an `httpx.MockTransport`; production passes
nothing and the lifespan reads `settings.environments_file`.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bragi_probe import __version__
from bragi_probe.api.routers import environments as environments_router
from bragi_probe.core.environments import EnvironmentSpec, load_environments
from bragi_probe.core.errors import UnknownEnvironmentError
from bragi_probe.core.settings import Settings, get_logger, load_settings
from bragi_probe.probes.coordinator import ProbeCoordinator

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    environments: Sequence[EnvironmentSpec] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """
    Construct and configure the bragi-probe FastAPI application.

    Parameters
    ----------
    settings:
        Configuration to use; defaults to the cached process settings.
    environments:
        Explicit environment list. When omitted, the lifespan loads
        ``settings.environments_file`` at startup.
    transport:
        Optional httpx transport forwarded to the coordinator.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    cfg = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Load the environment list once and expose the coordinator on `app.state`."""
        envs = environments
        if envs is None:
            envs = load_environments(cfg.environments_file)
            logger.info("Loaded %d environments from %s", len(envs), cfg.environments_file)
        app.state.coordinator = ProbeCoordinator(envs, settings=cfg, transport=transport)
        yield
        logger.info("Shutting down")

    app = FastAPI(
        title="Bragi Probe API",
        description="Availability and index inventory of Bragi/Elasticsearch environments",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Global Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(UnknownEnvironmentError)
    async def unknown_environment_handler(
        request: Request, exc: UnknownEnvironmentError
    ) -> JSONResponse:
        """Map lookups of unconfigured environments to HTTP 404."""
        return JSONResponse(
            status_code=404,
            content={
                "error": "Environment Error",
                "detail": str(exc),
                "known": list(exc.known),
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler so unhandled exceptions still return structured JSON."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    app.include_router(environments_router.router)

    @app.get("/health", tags=["System"])
    async def health_check(request: Request) -> dict[str, str | int]:
        """Simple liveness probe; does not contact any environment."""
        coordinator: ProbeCoordinator = request.app.state.coordinator
        return {
            "status": "ok",
            "version": __version__,
            "environment": cfg.environment,
            "environments": len(coordinator.environments),
        }

    return app


__all__ = ["create_app"]
