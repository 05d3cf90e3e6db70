"""Core configuration, logging, errors, and metrics."""

from compose_trigger.core.config import Settings, get_settings
from compose_trigger.core.errors import (
    ComposeCommandError,
    ComposeFileNotFoundError,
    ComposeTriggerError,
    ForbiddenError,
    InvalidProjectPathError,
)
from compose_trigger.core.logging import configure_logging, structured_log
from compose_trigger.core.metrics import get_metrics, reset_metrics

__all__ = [
    "Settings",
    "get_settings",
    "ComposeTriggerError",
    "InvalidProjectPathError",
    "ComposeFileNotFoundError",
    "ForbiddenError",
    "ComposeCommandError",
    "configure_logging",
    "structured_log",
    "get_metrics",
    "reset_metrics",
]
