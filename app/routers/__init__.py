"""API routers."""

from app.routers.auth import router as auth_router
from app.routers.chat import router as chat_router

__all__ = ["auth_router", "chat_router"]
