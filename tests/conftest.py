"""Pytest configuration and shared fixtures."""

import os
import subprocess
from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("LOG_FORMAT", "readable")

TEST_TOKEN = "3f2b8c1e-6d4a-4f0e-9a57-1c2d3e4f5a6b"


class FakeCompose:
    """Stands in for subprocess.run; records every argv in call order."""

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.events: list[str] = []
        self.returncodes: dict[str, int] = {}
        self.spawn_errors: dict[str, OSError] = {}

    def _step(self, argv: list[str]) -> str:
        return "up" if "up" in argv else "pull"

    def __call__(self, argv, **kwargs) -> subprocess.CompletedProcess:
        step = self._step(argv)
        self.events.append(f"start:{step}")
        if step in self.spawn_errors:
            raise self.spawn_errors[step]
        self.calls.append(list(argv))
        self.events.append(f"end:{step}")
        rc = self.returncodes.get(step, 0)
        return subprocess.CompletedProcess(argv, rc, stdout=f"{step} output\n", stderr="" if rc == 0 else "boom\n")


@pytest.fixture(autouse=True)
def _reset_metrics() -> None:
    from compose_trigger.core.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def fake_compose(monkeypatch: pytest.MonkeyPatch) -> FakeCompose:
    """Replace the compose subprocess with a recorder."""
    fake = FakeCompose()
    from compose_trigger.services import compose
    monkeypatch.setattr(compose.subprocess, "run", fake)
    return fake


@pytest.fixture
def projects_dir(tmp_path: Path) -> Path:
    """Base dir with one deployable project 'foo' and one empty dir 'bare'."""
    base = tmp_path / "projects"
    (base / "foo").mkdir(parents=True)
    (base / "foo" / "docker-compose.yml").write_text("services: {}\n")
    (base / "bare").mkdir()
    return base


@pytest.fixture
def token_file(tmp_path: Path) -> Path:
    path = tmp_path / ".compose-trigger.token"
    path.write_text(TEST_TOKEN)
    return path


@pytest.fixture
def make_settings(projects_dir: Path, token_file: Path) -> Callable:
    from compose_trigger.core.config import Settings

    def _make(**overrides):
        values = {"project_base_dir": projects_dir, "auth_token_file": token_file}
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def client(settings) -> TestClient:
    """Test client for an app with auth enabled and TEST_TOKEN on disk."""
    from compose_trigger.main import create_app
    return TestClient(create_app(settings))


@pytest.fixture
def auth_token() -> str:
    """Token the token_file fixture writes."""
    return TEST_TOKEN


@pytest.fixture
def auth_headers(auth_token: str) -> dict:
    return {"Authorization": f"Bearer {auth_token}"}
