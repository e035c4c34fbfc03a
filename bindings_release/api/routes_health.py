from fastapi import APIRouter
from bindings_release import __version__
from bindings_release.core.config import settings

router = APIRouter()

@router.get("/health")
def health():
    return {"status": "ok", "app": settings.app_name, "version": __version__}
