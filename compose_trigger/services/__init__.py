"""Services: token store, compose runner, update dispatch."""

from compose_trigger.services.compose import run_compose
from compose_trigger.services.dispatcher import (
    locate_compose_file,
    parse_project_id,
    run_update,
)
from compose_trigger.services.token_store import is_valid_token, load_or_create_token

__all__ = [
    "run_compose",
    "parse_project_id",
    "locate_compose_file",
    "run_update",
    "is_valid_token",
    "load_or_create_token",
]
