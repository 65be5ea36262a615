import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chirpy.api.errors import chirpy_error_handler
from chirpy.api.routes.admin import router as admin_router
from chirpy.api.routes.auth import router as auth_router
from chirpy.api.routes.chirps import router as chirps_router
from chirpy.api.routes.health import router as health_router
from chirpy.api.routes.users import router as users_router
from chirpy.api.routes.webhooks import router as webhooks_router
from chirpy.core.config import settings
from chirpy.core.errors import ChirpyError

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # no signing secret, no server
    settings.require_secret()
    logger.info("Chirpy backend starting on platform %r", settings.PLATFORM or "production")
    yield
    logger.info("Chirpy backend stopped")


app = FastAPI(title="Chirpy Backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ChirpyError, chirpy_error_handler)  # type: ignore[arg-type]

app.include_router(health_router)
app.include_router(users_router)
app.include_router(auth_router)
app.include_router(chirps_router)
app.include_router(webhooks_router)
app.include_router(admin_router)
