"""FastAPI dependencies: settings from app state, bearer-token guard."""

import re
from typing import Annotated, Optional

from fastapi import Header, Request

from compose_trigger.core.config import Settings
from compose_trigger.core.errors import ForbiddenError
from compose_trigger.core.logging import structured_log
from compose_trigger.core.metrics import record_unauthorized

BEARER_TOKEN_RE = re.compile(r"^Bearer (.+)$")


def get_app_settings(request: Request) -> Settings:
    """Settings the app was built with (see create_app)."""
    return request.app.state.settings


def _client_address(request: Request) -> str:
    if request.client is None:
        return "unknown"
    return f"{request.client.host}:{request.client.port}"


def _reject(request: Request, reason: str) -> ForbiddenError:
    record_unauthorized()
    structured_log(
        "WARNING",
        f"rejected {_client_address(request)}: {reason}",
        operation="auth.check",
        metadata={"client": _client_address(request), "path": request.url.path},
    )
    return ForbiddenError(reason)


def require_bearer_token(
    request: Request,
    authorization: Annotated[Optional[str], Header(alias="Authorization")] = None,
) -> None:
    """Gate a route behind 'Authorization: Bearer <token>' when auth is enabled."""
    settings = get_app_settings(request)
    if not settings.auth_enabled:
        return

    match = BEARER_TOKEN_RE.fullmatch(authorization or "")
    if match is None:
        raise _reject(request, "missing token")
    if match.group(1) != request.app.state.auth_token:
        raise _reject(request, "invalid token")
