from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carddex.api import health_router, integrity_router
from carddex.config import settings
from carddex.db.database import get_store


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    get_store()
    yield


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("carddex"),
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(integrity_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
