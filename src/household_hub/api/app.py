"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from household_hub.adapters.api_client import BackendError
from household_hub.api.auth import router as auth_router
from household_hub.api.catalog import router as catalog_router
from household_hub.api.chores import router as chores_router
from household_hub.api.shopping import router as shopping_router
from household_hub.app_logging import configure_logging
from household_hub.config import parse_origins
from household_hub.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Backend API at %s", container.settings.api_base_url)
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    origins = parse_origins(container.settings.cors_allowed_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials="*" not in origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(auth_router)
    app.include_router(catalog_router)
    app.include_router(chores_router)
    app.include_router(shopping_router)

    @app.exception_handler(BackendError)
    async def backend_error_handler(
        request: Request, exc: BackendError
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            logger.info("Backend rejected token on %s", request.url.path)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.error})

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.info("Invalid input on %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
