import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from bindings_release import __version__
from bindings_release.core.config import settings
from bindings_release.core.logging import configure_logging
from bindings_release.api.routes import router as api_router

configure_logging()
log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    log.info("Starting release dispatch API (%s)", settings.app_env)
    yield
    log.info("Shutting down release dispatch API")


app = FastAPI(
    title=settings.app_name,
    version=__version__,
    lifespan=lifespan
)
app.include_router(api_router, prefix="/v1")
