"""Main API router aggregation."""

from fastapi import APIRouter

from renaspress.api.auth import router as auth_router
from renaspress.api.forum import router as forum_router
from renaspress.api.newsapi import router as newsapi_router
from renaspress.api.posts import router as posts_router
from renaspress.api.translate import router as translate_router
from renaspress.api.upload import router as upload_router
from renaspress.api.users import router as users_router

# Main API router
api_router = APIRouter(prefix="/api")

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(posts_router)
api_router.include_router(users_router)
api_router.include_router(upload_router)
api_router.include_router(forum_router)
api_router.include_router(translate_router)
api_router.include_router(newsapi_router)
