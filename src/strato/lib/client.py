from __future__ import annotations

import logging

from typing import Any, Self

import backoff
import requests

from strato import __version__
from strato.lib.config import DEFAULT_API_URL, GlobalConfig
from strato.lib.errors import APIError, NotAuthenticatedError, NotFoundError
from strato.lib.models import Deployment, Pagination, Project, User

logger = logging.getLogger(__name__)

PAGE_SIZE = 20
LIST_API_VERSION = 6
REQUEST_TIMEOUT = 30  # seconds
MAX_TRIES = 3


class ServerError(APIError):
    """5xx responses, which are retried"""

    pass


def _raise_for_status(resp: requests.Response) -> None:
    if resp.ok:
        return

    try:
        error = resp.json().get("error", {})
    except ValueError:
        error = {}

    code = error.get("code")
    message = error.get("message") or f"{resp.status_code} {resp.reason}"
    logger.debug("API error %s (%s): %s", resp.status_code, code, message)

    if resp.status_code == 404:  # noqa: PLR2004
        raise NotFoundError(message, status=resp.status_code, code=code)
    if resp.status_code >= 500:  # noqa: PLR2004
        raise ServerError(message, status=resp.status_code, code=code)
    raise APIError(message, status=resp.status_code, code=code)


class Client:
    """Thin wrapper around the Strato REST API.

    ``current_team`` is sent as ``teamId`` on every request so that the
    calls are scoped to a team instead of the personal account.
    """

    def __init__(
        self,
        token: str | None,
        api_url: str = DEFAULT_API_URL,
        current_team: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.current_team = current_team
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = f"strato-cli/{__version__}"
        self._user: User | None = None

    def __repr__(self):
        return f"<{self.__class__.__name__}: {self.api_url}>"

    @classmethod
    def from_config(
        cls: type[Self],
        config: GlobalConfig,
        token: str | None = None,
    ) -> Self:
        return cls(
            token=token or config.token,
            api_url=config.api_url,
            current_team=config.current_team,
        )

    @backoff.on_exception(
        backoff.expo,
        (requests.ConnectionError, requests.Timeout, ServerError),
        max_tries=MAX_TRIES,
    )
    def fetch(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        method: str = "GET",
    ) -> dict[str, Any]:
        if not self.token:
            raise NotAuthenticatedError()

        params = dict(params or {})
        if self.current_team:
            params["teamId"] = self.current_team

        url = f"{self.api_url}{path}"
        logger.debug("%s %s %s", method, url, params)
        resp = self.session.request(
            method,
            url,
            params=params,
            headers={"Authorization": f"Bearer {self.token}"},
            timeout=REQUEST_TIMEOUT,
        )
        _raise_for_status(resp)
        return resp.json()

    def get_user(self) -> User:
        if self._user is None:
            self._user = User.from_dict(self.fetch("/v2/user")["user"])
        return self._user

    def get_team(self, team_id: str) -> dict[str, Any]:
        return self.fetch(f"/v2/teams/{team_id}")

    def get_teams(self) -> list[dict[str, Any]]:
        return self.fetch("/v2/teams")["teams"]

    def get_project(self, project_id: str) -> Project:
        return Project.from_dict(self.fetch(f"/v9/projects/{project_id}"))

    def list_deployments(
        self,
        app: str | None = None,
        version: int = LIST_API_VERSION,
        meta: dict[str, str] | None = None,
        next_timestamp: int | None = None,
        limit: int = PAGE_SIZE,
    ) -> tuple[list[Deployment], Pagination]:
        params: dict[str, Any] = {"limit": limit}
        if app:
            params["app"] = app
        for key, value in (meta or {}).items():
            params[f"meta-{key}"] = value
        if next_timestamp is not None:
            params["until"] = next_timestamp

        resp = self.fetch(f"/v{version}/deployments", params=params)
        return (
            [Deployment.from_dict(d) for d in resp.get("deployments", [])],
            Pagination.from_dict(resp.get("pagination")),
        )

    def find_deployment(self, id_or_url: str) -> Deployment:
        return Deployment.from_dict(self.fetch(f"/v13/deployments/{id_or_url}"))

    def close(self) -> None:
        self.session.close()
