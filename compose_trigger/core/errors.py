"""Custom exceptions for the compose trigger webhook."""

from typing import Any, Optional


class ComposeTriggerError(Exception):
    """Base exception for webhook errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class InvalidProjectPathError(ComposeTriggerError):
    """Raised when the request path does not name a valid project identifier.

    Answers 502 Bad Gateway, which existing callers of the hook rely on.
    """

    def __init__(self, path: str) -> None:
        super().__init__(
            f"request-path '{path}' does not match regex",
            status_code=502,
            details={"path": path},
        )


class ComposeFileNotFoundError(ComposeTriggerError):
    """Raised when the project has no compose definition on disk."""

    def __init__(self, project_id: str, compose_file: str) -> None:
        super().__init__(
            f"'{compose_file}' not found",
            status_code=404,
            details={"project_id": project_id},
        )


class ForbiddenError(ComposeTriggerError):
    """Raised when the bearer token is missing or does not match."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Forbidden: {reason}", status_code=403, details={"reason": reason})


class ComposeCommandError(ComposeTriggerError):
    """Raised in strict mode when a compose step does not succeed."""

    def __init__(self, project_id: str, step: str, outcome: str, returncode: Optional[int]) -> None:
        super().__init__(
            f"{project_id}: compose {step} failed ({outcome})",
            status_code=500,
            details={
                "project_id": project_id,
                "step": step,
                "outcome": outcome,
                "returncode": returncode,
            },
        )
