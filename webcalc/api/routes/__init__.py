"""API routes package."""

from .health_routes import router as health_router
from .search_routes import router as search_router, get_orchestrator
from .tool_routes import router as tool_router, get_extract_service, get_wikipedia_service

__all__ = [
    "health_router",
    "search_router",
    "tool_router",
    "get_orchestrator",
    "get_extract_service",
    "get_wikipedia_service",
]
