"""Data models: Pydantic schemas and in-memory result entities."""

from compose_trigger.models.entities import CommandOutcome, OutcomeKind, UpdateResult
from compose_trigger.models.schemas import ErrorResponse, StepResultSchema, UpdateResponse

__all__ = [
    "CommandOutcome",
    "OutcomeKind",
    "UpdateResult",
    "ErrorResponse",
    "StepResultSchema",
    "UpdateResponse",
]
