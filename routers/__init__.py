# routers/__init__.py

from .role_permissions import router as role_permissions_router
from .health import router as health_router

__all__ = ["role_permissions_router", "health_router"]
