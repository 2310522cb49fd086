from carddex.api.health import router as health_router
from carddex.api.integrity import router as integrity_router

__all__ = [
    "health_router",
    "integrity_router",
]
