"""Load the shared bearer token from disk, generating it on first start."""

import os
import re
import uuid
from pathlib import Path

from compose_trigger.core.logging import structured_log

TOKEN_FILE_MODE = 0o600

_HEX = "[0-9a-fA-F]"
_HYPHENATED = f"{_HEX}{{8}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{4}}-{_HEX}{{12}}"
UUID_FORMS_RE = re.compile(
    rf"(?:urn:uuid:)?{_HYPHENATED}|\{{{_HYPHENATED}\}}|{_HEX}{{32}}",
    re.IGNORECASE,
)


def is_valid_token(value: str) -> bool:
    """True for the hyphenated, braced, urn:uuid: or 32-hex-digit UUID forms only."""
    return UUID_FORMS_RE.fullmatch(value) is not None


def _write_token(path: Path, token: str) -> None:
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, TOKEN_FILE_MODE)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(token)
    # O_CREAT mode only applies to new files; tighten a pre-existing one too.
    os.chmod(path, TOKEN_FILE_MODE)


def generate_and_write_token(path: Path) -> str:
    """Generate a fresh UUID token and persist it with owner-only permissions.

    A write failure is logged and the generated token is still returned, so
    the process keeps working with an in-memory token until restart.
    """
    structured_log("INFO", "Generating new auth token", operation="token.generate")
    token = str(uuid.uuid4())
    try:
        _write_token(path, token)
    except OSError as e:
        structured_log(
            "ERROR",
            f"Could not write token file '{path}': {e}",
            operation="token.generate",
            error={"type": type(e).__name__, "message": str(e)},
        )
    return token


def load_or_create_token(path: Path) -> str:
    """Return the token stored at path, or a newly generated one.

    The file content is used verbatim when it is a well-formed UUID. An
    unreadable file or any other content is treated as absent.
    """
    try:
        data = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        structured_log(
            "WARNING",
            f"Could not read token file '{path}'",
            operation="token.load",
            metadata={"token_file": str(path)},
        )
        return generate_and_write_token(path)

    if not is_valid_token(data):
        structured_log(
            "WARNING",
            f"Invalid content in token file '{path}'",
            operation="token.load",
            metadata={"token_file": str(path)},
        )
        return generate_and_write_token(path)

    structured_log(
        "INFO",
        "Loaded auth token",
        operation="token.load",
        metadata={"token_file": str(path)},
    )
    return data
