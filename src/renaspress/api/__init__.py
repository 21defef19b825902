"""API routers."""

from renaspress.api.router import api_router

__all__ = ["api_router"]
