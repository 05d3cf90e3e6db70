"""API route modules."""

from compose_trigger.api.routes.health import router as health_router
from compose_trigger.api.routes.update import router as update_router

__all__ = ["health_router", "update_router"]
