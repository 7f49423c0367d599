"""FastAPI application factory and configuration."""

import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from .exceptions import PreviewError
from .routes import router
from config.logging_config import configure_logging
from config.settings import get_settings
from markup.languages import LanguageRegistry


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    configure_logging(settings.log_file)
    logger.info("Starting markup preview service...")

    registry = getattr(app.state, "registry", None)
    if registry is None:
        registry = LanguageRegistry()
        app.state.registry = registry

    if settings.preload_languages:
        results = await registry.preload(settings.preload_languages)
        failed = [
            name
            for name, ok in zip(settings.preload_languages, results)
            if not ok
        ]
        if failed:
            logger.warning(f"Could not preload languages: {failed}")
        else:
            logger.info(f"Preloaded languages: {settings.preload_languages}")

    yield

    logger.info("Server shut down cleanly")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Discord Markup Preview",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Register routes
    app.include_router(router)

    # Exception handlers
    @app.exception_handler(PreviewError)
    async def preview_error_handler(request: Request, exc: PreviewError):
        """Handle preview errors and return the error envelope."""
        logger.warning(f"Preview Error: {exc.error_type} - {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_error_format(),
        )

    @app.exception_handler(Exception)
    async def general_error_handler(request: Request, exc: Exception):
        """Handle general errors and return the error envelope."""
        logger.error(f"General Error: {str(exc)}")
        logger.error(traceback.format_exc())
        return JSONResponse(
            status_code=500,
            content={
                "type": "error",
                "error": {
                    "type": "api_error",
                    "message": "An unexpected error occurred.",
                },
            },
        )

    return app


# Default app instance for uvicorn
app = create_app()
