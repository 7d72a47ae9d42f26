"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from macro_tracker.api.meals import router as meals_router
from macro_tracker.api.products import router as products_router
from macro_tracker.app_logging import configure_logging
from macro_tracker.config import parse_cors_origins
from macro_tracker.containers import AppContainer
from macro_tracker.domain.errors import (
    OutOfRangeError,
    ResolutionError,
    ValidationError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.debug)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    origins = parse_cors_origins(container.settings.cors_allow_origins)
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(meals_router)
    app.include_router(products_router)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": exc.message, "errors": exc.errors},
        )

    @app.exception_handler(ResolutionError)
    async def handle_resolution_error(
        request: Request, exc: ResolutionError
    ) -> JSONResponse:
        if isinstance(exc, OutOfRangeError):
            logger.error("Rejected implausible values for %s", exc.ingredient)
        ingredient = exc.ingredient or ""
        return JSONResponse(
            status_code=422,
            content={
                "message": f"Please enter macros manually for {ingredient}".strip(),
                "ingredient": exc.ingredient,
            },
        )

    @app.get("/api/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
