"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.accounts import router as accounts_router
from api.v1.routes.posts import router as posts_router
from api.v1.routes.profiles import router as profiles_router

router = APIRouter()
router.include_router(accounts_router)
router.include_router(profiles_router)
router.include_router(posts_router)
