"""Deployment trigger: GET|POST /update/{project_id}[/]."""

from typing import Annotated

from fastapi import APIRouter, Depends

from compose_trigger.api.dependencies import get_app_settings, require_bearer_token
from compose_trigger.core.config import Settings
from compose_trigger.core.metrics import record_update_request
from compose_trigger.models.schemas import StepResultSchema, UpdateResponse
from compose_trigger.services.dispatcher import parse_project_id, run_update

router = APIRouter(tags=["update"])


@router.api_route(
    "/update/{project_path:path}",
    methods=["GET", "POST"],
    response_model=UpdateResponse,
    dependencies=[Depends(require_bearer_token)],
)
def update_project(
    project_path: str,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UpdateResponse:
    """
    Pull and restart the containers of one project.
    Declared sync so the blocking compose calls run in the server threadpool.
    """
    record_update_request()
    project_id = parse_project_id(f"/update/{project_path}")
    result = run_update(settings, project_id)
    return UpdateResponse(
        project_id=result.project_id,
        compose_file=result.compose_file,
        steps=[StepResultSchema(**s.to_dict()) for s in result.steps],
    )
