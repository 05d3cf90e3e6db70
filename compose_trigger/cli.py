"""Command-line entry point: compose-trigger [flags].

Flags override COMPOSE_TRIGGER_* environment variables and .env values.
The camelCase spellings (-projectBaseDir, -port, -authTokenFile, with one
or two dashes) are accepted for existing service units.
"""

import argparse
import sys
from typing import Any, Optional, Sequence

import uvicorn
from pydantic import ValidationError

from compose_trigger.core.config import Settings
from compose_trigger.core.logging import configure_logging
from compose_trigger.main import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="compose-trigger",
        description="Webhook that runs 'pull' and 'up -d' for docker-compose projects.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "--project-base-dir", "-projectBaseDir", "--projectBaseDir",
        dest="project_base_dir",
        help="directory where all your projects are located (default: /root/)",
    )
    parser.add_argument("--port", "-port", dest="port", type=int, help="listening port (default: 8080)")
    parser.add_argument(
        "--auth-token-file", "-authTokenFile", "--authTokenFile",
        dest="auth_token_file",
        help="file where the auth-token will be stored (default: /root/.compose-trigger.token)",
    )
    parser.add_argument("--host", dest="host", help="listening address (default: 0.0.0.0)")
    parser.add_argument(
        "--no-auth",
        dest="auth_enabled",
        action="store_false",
        default=None,
        help="serve /update/ without the bearer-token check",
    )
    parser.add_argument(
        "--compose-command",
        dest="compose_command",
        help="compose executable, e.g. 'docker compose' (default: docker-compose)",
    )
    parser.add_argument(
        "--fail-on-command-error",
        dest="fail_on_command_error",
        action="store_true",
        default=None,
        help="answer 500 when pull or up fails instead of 200",
    )
    parser.add_argument("--log-level", dest="log_level", help="DEBUG, INFO, WARNING, ERROR or CRITICAL")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Settings from environment, with flags that were given taking precedence."""
    overrides: dict[str, Any] = {k: v for k, v in vars(args).items() if v is not None}
    return Settings(**overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        parser.error(str(e))

    configure_logging(settings.log_level)
    app = create_app(settings)
    if settings.auth_enabled:
        # Shown once so the operator can configure callers.
        print(f"auth-token: {app.state.auth_token}", flush=True)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
