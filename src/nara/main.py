"""Main entry point for NARA application."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from nara.api.deps import init_pipeline
from nara.api.routes import assessment, health
from nara.config import settings
from nara.services.artifacts import UPLOADS_MOUNT


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize resources on startup."""
    settings.ensure_directories()
    init_pipeline(settings)
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="NARA - Narrative Arc Assessment",
        description="Segment-by-segment AI assessment of uploaded videos",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Include API routes
    app.include_router(health.router)
    app.include_router(assessment.router)

    # Serve extracted audio and frames
    app.mount(
        UPLOADS_MOUNT,
        StaticFiles(directory=settings.artifacts_dir, check_dir=False),
        name="uploads",
    )

    return app


app = create_app()


def main() -> None:
    """Run the application."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings.ensure_directories()
    uvicorn.run(
        "nara.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
