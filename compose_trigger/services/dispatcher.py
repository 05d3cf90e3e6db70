"""Update dispatch: parse project id -> locate compose file -> pull -> up -d."""

import re
import time
from pathlib import Path

from compose_trigger.core.config import Settings
from compose_trigger.core.errors import (
    ComposeCommandError,
    ComposeFileNotFoundError,
    InvalidProjectPathError,
)
from compose_trigger.core.logging import structured_log
from compose_trigger.core.metrics import (
    record_compose_file_missing,
    record_invalid_path,
    record_update_completed,
)
from compose_trigger.models.entities import UpdateResult
from compose_trigger.services.compose import PULL_ARGS, UP_ARGS, run_compose

UPDATE_PATH_RE = re.compile(r"^/update/([a-zA-Z0-9_\-]+)/?$")


def parse_project_id(path: str) -> str:
    """Extract the project identifier from an /update/<id>[/] request path."""
    match = UPDATE_PATH_RE.fullmatch(path)
    if match is None:
        record_invalid_path()
        structured_log(
            "WARNING",
            f"request-path '{path}' does not match regex",
            operation="update.parse",
        )
        raise InvalidProjectPathError(path)
    return match.group(1)


def compose_file_for(settings: Settings, project_id: str) -> Path:
    return settings.project_base_dir / project_id / settings.compose_file_name


def locate_compose_file(settings: Settings, project_id: str) -> Path:
    """Return the project's compose file path, raising 404 when it does not exist."""
    compose_file = compose_file_for(settings, project_id)
    if not compose_file.exists():
        record_compose_file_missing()
        structured_log(
            "WARNING",
            f"'{compose_file}' not found",
            project_id=project_id,
            operation="update.locate",
        )
        raise ComposeFileNotFoundError(project_id, str(compose_file))
    return compose_file


def run_update(settings: Settings, project_id: str) -> UpdateResult:
    """
    Pull images then recreate containers for one project, strictly in sequence.
    Step outcomes are recorded but only abort the update in strict mode
    (settings.fail_on_command_error).
    """
    compose_file = locate_compose_file(settings, project_id)
    result = UpdateResult(project_id=project_id, compose_file=str(compose_file))
    started = time.monotonic()

    structured_log("INFO", f"{project_id}: pulling ...", project_id=project_id, operation="update.pull")
    pull = run_compose("pull", settings.compose_argv, compose_file, PULL_ARGS, project_id=project_id)
    result.steps.append(pull)
    if settings.fail_on_command_error and not pull.ok:
        raise ComposeCommandError(project_id, "pull", pull.kind, pull.returncode)

    structured_log("INFO", f"{project_id}: starting ...", project_id=project_id, operation="update.up")
    up = run_compose("up", settings.compose_argv, compose_file, UP_ARGS, project_id=project_id)
    result.steps.append(up)
    if settings.fail_on_command_error and not up.ok:
        raise ComposeCommandError(project_id, "up", up.kind, up.returncode)

    duration = time.monotonic() - started
    record_update_completed(duration)
    structured_log(
        "INFO" if result.ok else "WARNING",
        f"{project_id}: done",
        project_id=project_id,
        operation="update.done",
        duration_ms=duration * 1000,
        metadata={"steps": {s.step: s.kind for s in result.steps}},
    )
    return result
