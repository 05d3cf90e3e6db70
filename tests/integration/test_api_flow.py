"""Integration tests: full HTTP flow with the compose subprocess mocked."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from compose_trigger.main import create_app


def test_update_200_runs_pull_then_up(client: TestClient, auth_headers: dict, fake_compose, projects_dir: Path) -> None:
    resp = client.post("/update/foo", headers=auth_headers)
    assert resp.status_code == 200
    data = resp.json()
    assert data["project_id"] == "foo"
    assert data["status"] == "updated"
    assert data["compose_file"] == str(projects_dir / "foo" / "docker-compose.yml")
    assert [s["step"] for s in data["steps"]] == ["pull", "up"]
    assert all(s["outcome"] == "success" for s in data["steps"])
    assert fake_compose.events == ["start:pull", "end:pull", "start:up", "end:up"]
    assert fake_compose.calls[1][-2:] == ["up", "-d"]


@pytest.mark.parametrize("path", ["/update/foo", "/update/foo/"])
def test_update_get_and_trailing_slash(client: TestClient, auth_headers: dict, fake_compose, path: str) -> None:
    resp = client.get(path, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["project_id"] == "foo"


@pytest.mark.parametrize("path", ["/update/foo.bar", "/update/foo/bar", "/update/", "/update/foo%20bar"])
def test_update_bad_identifier_502(client: TestClient, auth_headers: dict, fake_compose, path: str) -> None:
    resp = client.post(path, headers=auth_headers)
    assert resp.status_code == 502
    assert resp.json()["error"] == "InvalidProjectPathError"
    assert fake_compose.calls == []


@pytest.mark.parametrize("project_id", ["missing", "bare"])
def test_update_no_compose_file_404(client: TestClient, auth_headers: dict, fake_compose, project_id: str) -> None:
    resp = client.post(f"/update/{project_id}", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json()["error"] == "ComposeFileNotFoundError"
    assert fake_compose.calls == []


def test_update_403_without_header(client: TestClient, fake_compose) -> None:
    resp = client.post("/update/foo")
    assert resp.status_code == 403
    assert resp.json()["details"]["reason"] == "missing token"
    assert fake_compose.calls == []


@pytest.mark.parametrize(
    "header",
    ["Bearer wrongtoken", "bearer {token}", "Bearer  {token}"],
)
def test_update_403_invalid_token(client: TestClient, fake_compose, auth_token: str, header: str) -> None:
    resp = client.post("/update/foo", headers={"Authorization": header.format(token=auth_token)})
    assert resp.status_code == 403
    assert auth_token not in resp.text
    assert fake_compose.calls == []


@pytest.mark.parametrize("header", ["Basic abc", "Bearer", "{token}"])
def test_update_403_malformed_header(client: TestClient, fake_compose, auth_token: str, header: str) -> None:
    resp = client.post("/update/foo", headers={"Authorization": header.format(token=auth_token)})
    assert resp.status_code == 403
    assert resp.json()["details"]["reason"] == "missing token"


def test_auth_checked_before_path(client: TestClient, fake_compose) -> None:
    resp = client.post("/update/foo.bar")
    assert resp.status_code == 403


def test_nonzero_exit_still_200(client: TestClient, auth_headers: dict, fake_compose) -> None:
    fake_compose.returncodes["pull"] = 1
    fake_compose.returncodes["up"] = 1
    resp = client.post("/update/foo", headers=auth_headers)
    assert resp.status_code == 200
    assert [s["outcome"] for s in resp.json()["steps"]] == ["nonzero_exit", "nonzero_exit"]


def test_spawn_failure_still_200(client: TestClient, auth_headers: dict, fake_compose) -> None:
    fake_compose.spawn_errors["pull"] = FileNotFoundError("docker-compose")
    fake_compose.spawn_errors["up"] = FileNotFoundError("docker-compose")
    resp = client.post("/update/foo", headers=auth_headers)
    assert resp.status_code == 200
    assert [s["outcome"] for s in resp.json()["steps"]] == ["spawn_failure", "spawn_failure"]
    assert resp.json()["steps"][0]["returncode"] is None


def test_strict_mode_500(make_settings, auth_headers: dict, fake_compose) -> None:
    client = TestClient(create_app(make_settings(fail_on_command_error=True)))
    fake_compose.returncodes["pull"] = 1
    resp = client.post("/update/foo", headers=auth_headers)
    assert resp.status_code == 500
    assert resp.json()["details"]["step"] == "pull"
    assert len(fake_compose.calls) == 1


def test_repeated_requests_identical(client: TestClient, auth_headers: dict, fake_compose) -> None:
    first = client.post("/update/foo", headers=auth_headers)
    second = client.post("/update/foo", headers=auth_headers)
    assert first.status_code == second.status_code == 200
    assert first.json()["steps"][0]["step"] == second.json()["steps"][0]["step"]
    assert len(fake_compose.calls) == 4


def test_no_auth_variant(make_settings, fake_compose, token_file: Path) -> None:
    token_file.unlink()
    client = TestClient(create_app(make_settings(auth_enabled=False)))
    resp = client.post("/update/foo")
    assert resp.status_code == 200
    assert not token_file.exists()


def test_generated_token_accepted(make_settings, fake_compose, token_file: Path, auth_headers: dict) -> None:
    token_file.write_text("garbage")
    app = create_app(make_settings())
    token = app.state.auth_token
    assert token != "garbage"
    assert token_file.read_text() == token
    client = TestClient(app)
    assert client.post("/update/foo", headers={"Authorization": f"Bearer {token}"}).status_code == 200
    assert client.post("/update/foo", headers=auth_headers).status_code == 403


def test_health_unauthenticated(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_root(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["service"] == "compose-trigger"


def test_metrics_reflect_requests(client: TestClient, auth_headers: dict, fake_compose) -> None:
    client.post("/update/foo", headers=auth_headers)
    client.post("/update/missing", headers=auth_headers)
    client.post("/update/a.b", headers=auth_headers)
    client.post("/update/foo")
    m = client.get("/metrics").json()
    assert m["update_requests_total"] == 3
    assert m["updates_completed_total"] == 1
    assert m["compose_file_missing_total"] == 1
    assert m["rejected_invalid_path_total"] == 1
    assert m["rejected_unauthorized_total"] == 1
    assert m["update_duration_seconds"]["count"] == 1
