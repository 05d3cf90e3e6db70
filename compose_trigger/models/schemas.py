"""Pydantic response models for the HTTP API."""

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class StepResultSchema(BaseModel):
    """One compose step as reported to the caller."""

    step: Literal["pull", "up"]
    outcome: Literal["success", "nonzero_exit", "spawn_failure"]
    returncode: Optional[int] = None
    duration_ms: float = Field(default=0.0, ge=0)


class UpdateResponse(BaseModel):
    """200 OK response for /update/{project_id}.

    Both steps were launched and awaited; individual outcomes are listed but
    do not change the status code unless strict mode is on.
    """

    project_id: str
    status: Literal["updated"] = "updated"
    compose_file: str
    steps: list[StepResultSchema]


class ErrorResponse(BaseModel):
    """Body of every ComposeTriggerError response."""

    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
