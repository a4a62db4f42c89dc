"""Route handlers for the Web API."""

from studysync.web.routes.ai import router as ai_router
from studysync.web.routes.health import router as health_router
from studysync.web.routes.subjects import router as subjects_router

__all__ = [
    "ai_router",
    "health_router",
    "subjects_router",
]
