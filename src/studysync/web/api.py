"""FastAPI application factory.

Main entry point for the StudySync Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studysync import __version__
from studysync.ai.assistant import StudyAssistant
from studysync.core.study_store import StudyDataStore
from studysync.web.routes import ai_router, health_router, subjects_router

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    store = app.state.store
    logger.info(
        "api_startup",
        store_injected=store is not None,
        subjects=len(store.subjects) if store is not None else None,
    )
    yield
    logger.info("api_shutdown")


def create_app(
    store: StudyDataStore | None = None,
    assistant: StudyAssistant | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        store: Loaded study store (default: file store from config, on first use)
        assistant: Study assistant (default: built from config, on first use)

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="StudySync API",
        description="Web API for the StudySync study tracker",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.assistant = assistant

    # CORS middleware for web clients
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(subjects_router)
    app.include_router(ai_router)

    return app


# Default app instance for uvicorn
app = create_app()
