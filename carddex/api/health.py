"""
Health check endpoints.

Provides liveness and readiness probes with a store availability check.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from carddex.db.database import get_store
from carddex.db.store import KeyValueStore, StoreError

router = APIRouter(tags=["health"])

_PROBE_KEY = "__ready_probe__"


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    store: str | None = None


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Liveness probe.

    Returns healthy if the service is running.
    Does not check dependencies.
    """
    return HealthResponse(status="healthy")


@router.get(
    "/ready",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
)
def ready(
    response: Response,
    store: Annotated[KeyValueStore, Depends(get_store)],
) -> HealthResponse:
    """
    Readiness probe.

    Returns ready if the persisted store can be read. Returns 503 when the
    store is unavailable; the local cache then runs degraded.
    """
    if store.available:
        try:
            store.get(_PROBE_KEY)
            return HealthResponse(status="ready", store="connected")
        except StoreError:
            pass
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthResponse(status="not ready", store="unavailable")
