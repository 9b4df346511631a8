"""API routes package."""

from filestore.routes.auth_routes import router as auth_router
from filestore.routes.file_routes import router as file_router
from filestore.routes.status_routes import router as status_router
from filestore.routes.user_routes import router as user_router

__all__ = ["auth_router", "file_router", "status_router", "user_router"]
