"""API routes, mounted under settings.API_PREFIX."""

from fastapi import APIRouter

from kalat.api.routes import auth, fragments, health, locations

router = APIRouter()
router.include_router(auth.router, prefix="/login", tags=["auth"])
router.include_router(fragments.router, prefix="/fragments", tags=["fragments"])
router.include_router(locations.router, prefix="/locations", tags=["locations"])
router.include_router(health.router, prefix="/health", tags=["health"])
