"""Health and metrics endpoints."""

from fastapi import APIRouter

from compose_trigger.core.metrics import get_metrics

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Liveness: minimal check, no auth."""
    return {"status": "ok"}


@router.get("/metrics")
async def metrics() -> dict:
    """Simple JSON metrics endpoint for operational visibility."""
    return get_metrics()
