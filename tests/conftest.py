import json
import shlex
import time

from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any
from unittest.mock import patch
from urllib.parse import urlsplit

import pytest
import requests

from click.testing import CliRunner

from strato.cli.cli import cli

MOCK_API_URL = "https://api.strato.test"
MOCK_TOKEN = "testing"  # noqa: S105

USER = {"id": "user_1", "username": "alice"}
TEAM = {"id": "team_1", "slug": "acme"}
PROJECT = {"id": "prj_1", "name": "my-app"}

NOT_FOUND = {"error": {"code": "not_found", "message": "Not Found"}}


@pytest.fixture(autouse=True)
def _environment(monkeypatch, tmp_path):
    """Point the CLI at a fake API and an empty global config dir."""
    monkeypatch.setenv("STRATO_TOKEN", MOCK_TOKEN)
    monkeypatch.setenv("STRATO_API_URL", MOCK_API_URL)
    monkeypatch.setenv("STRATO_GLOBAL_CONFIG", str(tmp_path / "global"))
    monkeypatch.setenv("COLUMNS", "200")
    monkeypatch.delenv("STRATO_ORG_ID", raising=False)
    monkeypatch.delenv("STRATO_PROJECT_ID", raising=False)


def make_response(status: int, body: Any, url: str = MOCK_API_URL) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.reason = "OK" if status < 400 else "Error"  # noqa: PLR2004
    resp.url = url
    resp._content = json.dumps(body).encode("utf-8")
    resp.headers["Content-Type"] = "application/json"
    return resp


class FakeAPI:
    """Stand-in for ``requests.Session.request`` routing on URL path.

    Routes hold either a ``(status, body)`` pair or a callable taking the
    query params and returning one. Every call is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, Any] | Callable] = {}
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def add(self, path: str, body: Any = None, status: int = 200) -> None:
        self.routes[path] = (status, body)

    def paths(self) -> list[str]:
        return [path for _, path, _ in self.calls]

    def params_for(self, path: str) -> dict[str, Any]:
        return next(params for _, p, params in self.calls if p == path)

    def __call__(self, method, url, params=None, **kwargs) -> requests.Response:
        path = urlsplit(url).path
        params = dict(params or {})
        self.calls.append((method, path, params))

        route = self.routes.get(path, (404, NOT_FOUND))
        if callable(route):
            route = route(params)
        status, body = route
        return make_response(status, body, url)


@pytest.fixture
def api() -> Iterator[FakeAPI]:
    fake = FakeAPI()
    fake.add("/v2/user", {"user": USER})
    fake.add("/v2/teams", {"teams": [TEAM]})
    fake.add(f"/v2/teams/{TEAM['id']}", TEAM)
    fake.add(f"/v9/projects/{PROJECT['id']}", PROJECT)
    with patch("requests.Session.request", new=fake):
        yield fake


@pytest.fixture
def _no_sleep():
    # backoff waits between retries
    with patch("time.sleep"):
        yield


@pytest.fixture
def deployment_factory() -> Callable[..., dict[str, Any]]:
    now = int(time.time() * 1000)

    def _deployment(
        name: str = PROJECT["name"],
        created_at: int | None = None,
        url: str | None = None,
        state: str = "READY",
        building_at: int | None = 1_000,
        ready: int | None = 13_000,
        username: str = USER["username"],
    ) -> dict[str, Any]:
        created_at = now - 60_000 if created_at is None else created_at
        return {
            "uid": f"dpl_{name}_{created_at}",
            "name": name,
            "url": url or f"{name}-{created_at}.strato.app",
            "state": state,
            "createdAt": created_at,
            "buildingAt": building_at,
            "ready": ready,
            "creator": {"username": username},
        }

    return _deployment


def write_link(path: Path, org_id: str, project_id: str = PROJECT["id"]) -> Path:
    link_dir = path.joinpath(".strato")
    link_dir.mkdir(parents=True, exist_ok=True)
    link_dir.joinpath("project.json").write_text(
        json.dumps({"orgId": org_id, "projectId": project_id}),
    )
    return path


@pytest.fixture
def linked_dir(tmp_path) -> Path:
    return write_link(tmp_path.joinpath("linked"), TEAM["id"])


@pytest.fixture
def user_linked_dir(tmp_path) -> Path:
    return write_link(tmp_path.joinpath("user-linked"), USER["id"])


@pytest.fixture
def unlinked_dir(tmp_path) -> Path:
    path = tmp_path.joinpath("unlinked")
    path.mkdir()
    return path


@pytest.fixture(scope="session")
def cli_runner():
    return CliRunner()


@pytest.fixture(scope="session")
def invoke(cli_runner):
    def _invoke(cmd, **kwargs):
        kwargs["catch_exceptions"] = kwargs.get("catch_exceptions", False)
        return cli_runner.invoke(cli, shlex.split(cmd), **kwargs)

    return _invoke
