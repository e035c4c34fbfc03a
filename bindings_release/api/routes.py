from fastapi import APIRouter
from bindings_release.api.routes_health import router as health_router
from bindings_release.api.routes_releases import router as releases_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(releases_router, tags=["releases"])
