"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from compose_trigger import __version__
from compose_trigger.api.routes import health_router, update_router
from compose_trigger.core.config import Settings, get_settings
from compose_trigger.core.errors import ComposeTriggerError
from compose_trigger.core.logging import structured_log
from compose_trigger.models.schemas import ErrorResponse
from compose_trigger.services.token_store import load_or_create_token


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: announce what the hook serves."""
    settings: Settings = app.state.settings
    structured_log(
        "INFO",
        "compose-trigger ready",
        operation="startup",
        metadata={
            "project_base_dir": str(settings.project_base_dir),
            "port": settings.port,
            "auth_enabled": settings.auth_enabled,
            "compose_command": settings.compose_command,
        },
    )
    yield


async def compose_trigger_error_handler(request: Request, exc: ComposeTriggerError) -> JSONResponse:
    """Map custom exceptions to JSON response."""
    body = ErrorResponse(error=exc.error_code, message=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def create_app(settings: Optional[Settings] = None, auth_token: Optional[str] = None) -> FastAPI:
    """
    Build the webhook app around one immutable Settings value.
    With auth enabled and no auth_token given, the token is loaded from
    (or generated into) settings.auth_token_file.
    """
    settings = settings or get_settings()
    if settings.auth_enabled and auth_token is None:
        auth_token = load_or_create_token(settings.auth_token_file)

    app = FastAPI(
        title="compose-trigger",
        description="Webhook that pulls and restarts docker-compose projects",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.auth_token = auth_token

    app.include_router(health_router)
    app.include_router(update_router)
    app.add_exception_handler(ComposeTriggerError, compose_trigger_error_handler)

    @app.get("/")
    async def root() -> dict:
        """Service info."""
        return {"service": "compose-trigger", "version": __version__}

    return app
