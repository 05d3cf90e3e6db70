"""Blocking invocation of the external compose tool."""

import subprocess
import time
from pathlib import Path
from typing import Sequence

from compose_trigger.core.logging import structured_log
from compose_trigger.core.metrics import record_command_failure
from compose_trigger.models.entities import CommandOutcome

OUTPUT_TAIL_CHARS = 2000

PULL_ARGS = ("pull",)
UP_ARGS = ("up", "-d")


def build_argv(compose_argv: Sequence[str], compose_file: Path, args: Sequence[str]) -> list[str]:
    return [*compose_argv, "-f", str(compose_file), *args]


def run_compose(
    step: str,
    compose_argv: Sequence[str],
    compose_file: Path,
    args: Sequence[str],
    *,
    project_id: str,
) -> CommandOutcome:
    """
    Run one compose command and wait for it to exit.
    No timeout is applied; the host environment is inherited.
    Never raises for command failures: the result is classified in the outcome.
    """
    argv = build_argv(compose_argv, compose_file, args)
    started = time.monotonic()
    try:
        proc = subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            errors="replace",
            check=False,
        )
    except OSError as e:
        duration_ms = (time.monotonic() - started) * 1000
        record_command_failure()
        structured_log(
            "ERROR",
            f"{project_id}: could not start compose {step}: {e}",
            project_id=project_id,
            operation=f"compose.{step}",
            duration_ms=duration_ms,
            metadata={"argv": argv},
            error={"type": type(e).__name__, "message": str(e)},
        )
        return CommandOutcome(
            step=step,
            argv=argv,
            kind="spawn_failure",
            error=str(e),
            duration_ms=duration_ms,
        )

    duration_ms = (time.monotonic() - started) * 1000
    output = (proc.stdout or "") + (proc.stderr or "")
    tail = output.strip()[-OUTPUT_TAIL_CHARS:]
    if proc.returncode == 0:
        structured_log(
            "DEBUG",
            f"{project_id}: compose {step} exited 0",
            project_id=project_id,
            operation=f"compose.{step}",
            duration_ms=duration_ms,
        )
        return CommandOutcome(
            step=step,
            argv=argv,
            kind="success",
            returncode=0,
            output_tail=tail,
            duration_ms=duration_ms,
        )

    record_command_failure()
    structured_log(
        "WARNING",
        f"{project_id}: compose {step} exited with status {proc.returncode}",
        project_id=project_id,
        operation=f"compose.{step}",
        duration_ms=duration_ms,
        metadata={"argv": argv, "returncode": proc.returncode, "output_tail": tail},
    )
    return CommandOutcome(
        step=step,
        argv=argv,
        kind="nonzero_exit",
        returncode=proc.returncode,
        output_tail=tail,
        duration_ms=duration_ms,
    )
