"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from wellness_tracker.api.admin import router as admin_router
from wellness_tracker.api.analytics import router as analytics_router
from wellness_tracker.api.meals import router as meals_router
from wellness_tracker.api.profiles import router as profiles_router
from wellness_tracker.api.records import router as records_router
from wellness_tracker.api.tracking import router as tracking_router
from wellness_tracker.app_logging import configure_logging
from wellness_tracker.config import Settings
from wellness_tracker.containers import AppContainer
from wellness_tracker.services.completions import AnalysisError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)
    app.include_router(meals_router)
    app.include_router(tracking_router)
    app.include_router(records_router)
    app.include_router(analytics_router)
    app.include_router(profiles_router)

    @app.exception_handler(ValueError)
    async def invalid_input(request: Request, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(AnalysisError)
    async def analysis_failed(request: Request, exc: AnalysisError) -> JSONResponse:
        logger.exception("Analysis failed", extra={"path": request.url.path})
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "detail": _format_error(
                    request.app.state.container.settings,
                    exc,
                    "Could not analyse the content. Please try again.",
                )
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _format_error(settings: Settings, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback
