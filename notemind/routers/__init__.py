"""API routers."""

from notemind.routers.ai import router as ai_router
from notemind.routers.auth import router as auth_router
from notemind.routers.notes import router as notes_router
from notemind.routers.tags import router as tags_router

__all__ = ["auth_router", "notes_router", "tags_router", "ai_router"]
