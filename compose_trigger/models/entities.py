"""In-memory result types for compose invocations."""

from dataclasses import dataclass, field
from typing import Any, Literal, Optional

OutcomeKind = Literal["success", "nonzero_exit", "spawn_failure"]


@dataclass(frozen=True)
class CommandOutcome:
    """Result of one external compose invocation."""

    step: str
    argv: list[str]
    kind: OutcomeKind
    returncode: Optional[int] = None
    output_tail: str = ""
    error: Optional[str] = None  # set for spawn_failure
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.kind == "success"

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.step,
            "outcome": self.kind,
            "returncode": self.returncode,
            "duration_ms": round(self.duration_ms, 2),
        }


@dataclass
class UpdateResult:
    """Everything one update request did, in order."""

    project_id: str
    compose_file: str
    steps: list[CommandOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(s.ok for s in self.steps)
